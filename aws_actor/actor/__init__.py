"""Client actor shell."""

from aws_actor.actor.client import AwsClient
from aws_actor.actor.models import ClientState


__all__ = [
    "AwsClient",
    "ClientState",
]
