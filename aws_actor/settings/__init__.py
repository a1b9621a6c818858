"""Client configuration and environment settings."""

from aws_actor.settings.app import (
    AwsEnvironment,
    ClientConfig,
    config_section_name,
    get_environment,
    read_profile,
    resolve_region,
)
from aws_actor.settings.constants import (
    DEFAULT_PROFILE,
    DEFAULT_PROVIDER_DOMAIN,
    DEFAULT_REGION,
)


__all__ = [
    "AwsEnvironment",
    "ClientConfig",
    "DEFAULT_PROFILE",
    "DEFAULT_PROVIDER_DOMAIN",
    "DEFAULT_REGION",
    "config_section_name",
    "get_environment",
    "read_profile",
    "resolve_region",
]
