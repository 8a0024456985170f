import logging
from os import environ
from typing import Mapping
from typing import Optional

from site_deployment.models import DeploySettings
from site_deployment.models import DeployTarget
from site_deployment.models import SourceRepository

logger = logging.getLogger(__name__)

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class SettingsError(ValueError):
    """Environment does not describe a usable deployment"""


def _flag(name: str, value: str) -> bool:
    if value.strip().lower() in _TRUE:
        return True
    if value.strip().lower() in _FALSE:
        return False
    raise SettingsError(f"{name} must be true or false, got '{value}'")


def load_settings(env: Optional[Mapping[str, str]] = None) -> DeploySettings:
    """Build DeploySettings from environment variables

    `app.py` loads app.env with python-dotenv before calling this, so values
    there end up in os.environ. Empty values are treated as unset.

    Args:
        env (Mapping[str, str]): variables to read, defaults to os.environ

    Raises:
        SettingsError: SOURCE_REPOSITORY is missing, or a value fails validation

    Returns:
        DeploySettings: validated settings
    """
    if env is None:
        env = environ
    values = {key: value for key, value in env.items() if value != ""}

    if "SOURCE_REPOSITORY" not in values:
        raise SettingsError("SOURCE_REPOSITORY (<owner>/<repo>) must be set")

    source = {}
    if "SOURCE_BRANCH" in values:
        source["branch"] = values["SOURCE_BRANCH"]
    if "GITHUB_TOKEN_SECRET" in values:
        source["oauth_secret_name"] = values["GITHUB_TOKEN_SECRET"]

    target = {
        "bucket_name": values.get("DEPLOY_BUCKET"),
        "bucket_region": values.get("DEPLOY_BUCKET_REGION"),
        "access_control": values.get("DEPLOY_ACCESS_CONTROL"),
        "cache_control": values.get("DEPLOY_CACHE_CONTROL", ""),
        "object_key": values.get("DEPLOY_OBJECT_KEY"),
        "encryption_key_arn": values.get("DEPLOY_KMS_KEY_ARN"),
    }
    if "DEPLOY_EXTRACT" in values:
        target["extract"] = _flag("DEPLOY_EXTRACT", values["DEPLOY_EXTRACT"])

    try:
        settings = DeploySettings(
            source=SourceRepository.from_string(values["SOURCE_REPOSITORY"], **source),
            target=DeployTarget(**target),
            pipeline_name=values.get("PIPELINE_NAME"),
        )
    except ValueError as err:
        raise SettingsError(f"invalid deployment settings in environment: {err}") from err
    logger.debug(f"Loaded settings: {settings}")
    return settings
