"""Director user management."""

from __future__ import annotations

import logging

from bosh_cli.errors import ApiRequestError

logger = logging.getLogger(__name__)


def create_user(api_client, username: str, password: str) -> tuple[bool, str]:
    try:
        api_client.create_user(username, password)
    except ApiRequestError as exc:
        logger.debug("user creation failed: status=%s", exc.status_code)
        return False, f"Error creating user: {exc}"
    return True, f"User {username} has been created"
