"""Command handlers for the bosh CLI."""

from __future__ import annotations

import time
from functools import partial
from typing import Callable

from bosh_cli.cli.dispatch import Command
from bosh_cli.cli.session import SessionState
from bosh_cli.client import ApiClient
from bosh_cli.deployment import Deployment
from bosh_cli.release import Release
from bosh_cli.stemcell import Stemcell
from bosh_cli.user import create_user

PROGRESS_EVERY_POLLS = 10
DEPLOY_DELAY_SECONDS = 0.5


class CommandHandlers:
    def __init__(
        self,
        session: SessionState,
        *,
        stdout,
        api_client_factory: Callable[..., object] = ApiClient,
        deployment_cls=Deployment,
        stemcell_cls=Stemcell,
        release_cls=Release,
        user_creator: Callable[..., tuple[bool, str]] = create_user,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.session = session
        self._stdout = stdout
        self._api_client_factory = api_client_factory
        self._deployment_cls = deployment_cls
        self._stemcell_cls = stemcell_cls
        self._release_cls = release_cls
        self._user_creator = user_creator
        self._sleep = sleep
        self._api_client = None

    def _say(self, message: str = "") -> None:
        print(message, file=self._stdout)

    @property
    def api_client(self):
        if self._api_client is None:
            credentials = self.session.credentials()
            if credentials is None:
                return None
            self._api_client = self._api_client_factory(
                self.session.current_config().target,
                credentials.username,
                credentials.password,
            )
        return self._api_client

    def _require_login(self) -> bool:
        if not self.session.is_logged_in():
            self._say("Please login first")
            return False
        return True

    def status(self) -> None:
        current = self.session.current_config()
        credentials = self.session.credentials()
        self._say(f"Target: {current.target or 'not set'}")
        self._say(f"User: {credentials.username if credentials else 'not set'}")
        self._say(f"Deployment: {current.deployment or 'not set'}")

    def set_target(self, name: str) -> None:
        current = self.session.current_config()
        self.session.set_target(name)

        if current.deployment is not None:
            deployment = self._deployment_cls(self.session.workdir, current.deployment)
            if not deployment.manifest_exists() or deployment.target != name:
                self._say("WARNING! Your deployment has been unset")
                self.session.clear_deployment()

        self._say(f"Target set to '{name}'")

    def show_target(self) -> None:
        target = self.session.current_config().target
        if target:
            self._say(f"Current target is {target}")
        else:
            self._say("Target not set")

    def set_deployment(self, name: str) -> None:
        deployment = self._deployment_cls(self.session.workdir, name)
        if not deployment.manifest_exists():
            self._say(f"Cannot find deployment '{deployment.path}'")
            self.list_deployments()
            return

        recorded_target = deployment.target
        if recorded_target != self.session.current_config().target:
            self.session.set_target(recorded_target)
            self._say(f"WARNING! Your target has been changed to '{recorded_target or ''}'")

        self.session.set_deployment(name)
        self._say(f"Deployment set to '{name}'")

    def list_deployments(self) -> None:
        deployments = self._deployment_cls.all(self.session.workdir)
        if not deployments:
            self._say("No deployments available")
            return

        self._say("Available deployments are:")
        for deployment in deployments:
            self._say(f"  {deployment.name}")

    def show_deployment(self) -> None:
        deployment = self.session.current_config().deployment
        if deployment:
            self._say(f"Current deployment is {deployment}")
        else:
            self._say("Deployment not set")

    def login(self, username: str, password: str) -> None:
        if self.session.current_config().target is None:
            self._say("Please choose target first")
            return

        self.session.store_credentials(username, password)
        self._api_client = None
        self._say(f"Saved credentials for {username}")

    def create_user(self, username: str, password: str) -> None:
        if not self._require_login():
            return

        _, message = self._user_creator(self.api_client, username, password)
        self._say(message)

    def _verify(self, artifact, kind: str, tarball_path: str) -> None:
        self._say(f"\nVerifying {kind}...")
        artifact.validate(
            lambda name, passed: self._say(f"{name:<60} {'OK' if passed else 'FAILED'}")
        )
        self._say()

        if artifact.valid:
            self._say(f"'{tarball_path}' is a valid {kind}")
            return

        self._say(f"'{tarball_path}' is not a valid {kind}:")
        for error in artifact.errors:
            self._say(f"- {error}")

    def _upload(self, artifact, job_label: str) -> tuple[bool, str]:
        def progress(poll_number: int, status: str) -> None:
            if poll_number % PROGRESS_EVERY_POLLS == 0:
                ts = time.strftime("%H:%M:%S")
                self._say(f"[{ts}] {job_label} job status is '{status}' ({poll_number} polls)...")

        return artifact.upload(self.api_client, progress)

    def verify_stemcell(self, tarball_path: str) -> None:
        self._verify(self._stemcell_cls(tarball_path), "stemcell", tarball_path)

    def upload_stemcell(self, tarball_path: str) -> None:
        if not self._require_login():
            return

        self._say("\nUploading stemcell...\n")
        uploaded, message = self._upload(self._stemcell_cls(tarball_path), "Stemcell creation")
        self._say("Stemcell uploaded and updated" if uploaded else message)

    def verify_release(self, tarball_path: str) -> None:
        self._verify(self._release_cls(tarball_path), "release", tarball_path)

    def upload_release(self, tarball_path: str) -> None:
        if not self._require_login():
            return

        self._say("\nUploading release...\n")
        uploaded, message = self._upload(self._release_cls(tarball_path), "Release update")
        self._say("Release uploaded and updated" if uploaded else message)

    def deploy(self) -> None:
        self._say("Deploying...")
        self._sleep(DEPLOY_DELAY_SECONDS)
        self._say("Deploy OK.")


COMMAND_TABLE: tuple[tuple[str, int | None, Callable[..., None], str], ...] = (
    ("status", 0, CommandHandlers.status, "Show current target, user and deployment"),
    ("set-target", 1, CommandHandlers.set_target, "Choose the director to talk to"),
    ("show-target", 0, CommandHandlers.show_target, "Show the current target"),
    ("set-deployment", 1, CommandHandlers.set_deployment, "Choose a deployment manifest"),
    ("list-deployments", 0, CommandHandlers.list_deployments, "List deployment manifests"),
    ("show-deployment", 0, CommandHandlers.show_deployment, "Show the current deployment"),
    ("login", 2, CommandHandlers.login, "Store credentials for the current target"),
    ("create-user", 2, CommandHandlers.create_user, "Create a director user"),
    ("verify-stemcell", 1, CommandHandlers.verify_stemcell, "Verify a stemcell tarball"),
    ("upload-stemcell", 1, CommandHandlers.upload_stemcell, "Upload a stemcell tarball"),
    ("verify-release", 1, CommandHandlers.verify_release, "Verify a release tarball"),
    ("upload-release", 1, CommandHandlers.upload_release, "Upload a release tarball"),
    ("deploy", 0, CommandHandlers.deploy, "Deploy the current deployment"),
)


def build_commands(handlers: CommandHandlers) -> dict[str, Command]:
    return {
        name: Command(name, arity, partial(function, handlers), summary)
        for name, arity, function, summary in COMMAND_TABLE
    }
