"""Request signing collaborators."""

from aws_actor.signing.protocols import Signer
from aws_actor.signing.sigv4 import CONTENT_SHA256_HEADER, SigV4Signer


__all__ = [
    "CONTENT_SHA256_HEADER",
    "SigV4Signer",
    "Signer",
]
