"""bosh CLI public surface."""

from bosh_cli.client import ApiClient
from bosh_cli.deployment import Deployment
from bosh_cli.errors import (
    ApiRequestError,
    ApiTimeoutError,
    ApiUnavailableError,
    BoshSDKError,
    TarballError,
)
from bosh_cli.release import Release
from bosh_cli.stemcell import Stemcell
from bosh_cli.user import create_user

__all__ = [
    "BoshSDKError",
    "ApiClient",
    "ApiUnavailableError",
    "ApiRequestError",
    "ApiTimeoutError",
    "TarballError",
    "Deployment",
    "Stemcell",
    "Release",
    "create_user",
]
