"""Defaults shared by settings and credential providers."""

from pathlib import Path


DEFAULT_REGION = "us-east-1"
DEFAULT_PROFILE = "default"
DEFAULT_PROVIDER_DOMAIN = "amazonaws.com"

DEFAULT_CREDENTIALS_FILE = Path("~/.aws/credentials")
DEFAULT_CONFIG_FILE = Path("~/.aws/config")
