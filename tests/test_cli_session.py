from __future__ import annotations

import pytest

from bosh_cli.cli.config import Credentials, GlobalConfig, WorkdirConfig
from bosh_cli.cli.session import SessionState


def test_empty_session_has_nothing_set() -> None:
    config = GlobalConfig()
    session = SessionState(config, "/work")

    assert session.current_config() == WorkdirConfig()
    assert session.credentials() is None
    assert session.is_logged_in() is False
    assert session.dirty is False
    assert config.workdirs == {}


def test_credentials_require_target_and_auth_entry() -> None:
    config = GlobalConfig(
        workdirs={"/work": WorkdirConfig(target="mycloud")},
        auth={"other": Credentials("bob", "pw")},
    )
    session = SessionState(config, "/work")
    assert session.credentials() is None

    config.auth["mycloud"] = Credentials("alice", "secret")
    assert session.credentials() == Credentials("alice", "secret")
    assert session.is_logged_in() is True


def test_sessions_are_scoped_by_workdir() -> None:
    config = GlobalConfig(workdirs={"/a": WorkdirConfig(target="one")})
    assert SessionState(config, "/a").current_config().target == "one"
    assert SessionState(config, "/b").current_config().target is None


def test_mutators_attach_workdir_record_and_mark_dirty() -> None:
    config = GlobalConfig()
    session = SessionState(config, "/work")

    session.set_target("mycloud")
    session.set_deployment("dev")

    assert session.dirty is True
    assert config.workdirs["/work"] == WorkdirConfig(target="mycloud", deployment="dev")

    session.clear_deployment()
    assert config.workdirs["/work"].deployment is None


def test_store_credentials_overwrites_entry_for_target() -> None:
    config = GlobalConfig(workdirs={"/work": WorkdirConfig(target="mycloud")})
    session = SessionState(config, "/work")

    session.store_credentials("alice", "old")
    session.store_credentials("alice", "new")

    assert config.auth == {"mycloud": Credentials("alice", "new")}


def test_store_credentials_without_target_raises() -> None:
    session = SessionState(GlobalConfig(), "/work")
    with pytest.raises(ValueError):
        session.store_credentials("alice", "secret")
    assert session.dirty is False
