"""Client settings powered by Pydantic models and BaseSettings."""

import configparser
from pathlib import Path
from typing import Annotated

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from aws_actor.settings.constants import (
    DEFAULT_CONFIG_FILE,
    DEFAULT_CREDENTIALS_FILE,
    DEFAULT_PROFILE,
    DEFAULT_PROVIDER_DOMAIN,
    DEFAULT_REGION,
)


logger = structlog.get_logger()


class AwsEnvironment(BaseSettings):
    """AWS variables read from the process environment."""

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )

    access_key_id: str | None = Field(
        default=None, validation_alias="AWS_ACCESS_KEY_ID"
    )
    secret_access_key: str | None = Field(
        default=None, validation_alias="AWS_SECRET_ACCESS_KEY"
    )
    session_token: str | None = Field(
        default=None, validation_alias="AWS_SESSION_TOKEN"
    )
    region: str | None = Field(default=None, validation_alias="AWS_REGION")
    default_region: str | None = Field(
        default=None, validation_alias="AWS_DEFAULT_REGION"
    )
    profile: str = Field(default=DEFAULT_PROFILE, validation_alias="AWS_PROFILE")
    shared_credentials_file: Path = Field(
        default=DEFAULT_CREDENTIALS_FILE,
        validation_alias="AWS_SHARED_CREDENTIALS_FILE",
    )
    config_file: Path = Field(
        default=DEFAULT_CONFIG_FILE, validation_alias="AWS_CONFIG_FILE"
    )
    ec2_metadata_disabled: bool = Field(
        default=False, validation_alias="AWS_EC2_METADATA_DISABLED"
    )


def get_environment() -> AwsEnvironment:
    """Get an environment settings instance."""
    return AwsEnvironment()


class ClientConfig(BaseModel):
    """Configuration for a client actor.

    ``region`` of None means the region is discovered from the
    environment and shared config file when the client starts.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    region: str | None = Field(default=None, description="Initial target region")
    provider_domain: Annotated[str, Field(min_length=1)] = DEFAULT_PROVIDER_DOMAIN
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        "aws-request-actor/1.0"
    )
    default_timeout_seconds: Annotated[float, Field(gt=0.0, le=300.0)] = 30.0
    metadata_timeout_seconds: Annotated[float, Field(gt=0.0, le=30.0)] = 1.0
    autoload_credentials: bool = Field(
        default=False,
        description="Refresh credentials from the provider chain on start",
    )


def read_profile(path: Path, section: str) -> dict[str, str] | None:
    """Read one section of an AWS INI style file.

    Args:
        path: File to read.
        section: Section name, e.g. ``default`` or ``profile dev``.

    Returns:
        The section's key/value pairs, or None if the file or section is
        missing.

    Raises:
        configparser.Error: If the file is not valid INI.
        UnicodeDecodeError: If the file is not UTF-8.
        OSError: If the file cannot be read.
    """
    expanded = path.expanduser()
    if not expanded.is_file():
        return None
    parser = configparser.ConfigParser(interpolation=None)
    parser.read(expanded, encoding="utf-8")
    if not parser.has_section(section):
        return None
    return dict(parser.items(section))


def config_section_name(profile: str) -> str:
    """Section name of a profile in the shared config file."""
    if profile == DEFAULT_PROFILE:
        return profile
    return f"profile {profile}"


def resolve_region(env: AwsEnvironment | None = None) -> str:
    """Discover the region to send requests to.

    Precedence: AWS_REGION, AWS_DEFAULT_REGION, the profile's ``region``
    in the shared config file, then us-east-1.

    Args:
        env: Environment settings (read from the process when None).

    Returns:
        Region name.
    """
    env = env or get_environment()
    if env.region:
        return env.region
    if env.default_region:
        return env.default_region

    try:
        section = read_profile(env.config_file, config_section_name(env.profile))
    except (configparser.Error, UnicodeDecodeError, OSError) as e:
        logger.warning(
            "config_file_unreadable",
            component="settings",
            path=str(env.config_file),
            error=str(e),
        )
        section = None

    if section and section.get("region"):
        return section["region"]
    return DEFAULT_REGION
