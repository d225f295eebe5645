"""Business logic services."""

from .dispatcher import ExtensionRequestHandler, dispatch
from .pipeline import ExtensionPipeline
from .signature import SignatureVerifier, get_default_verifier

__all__ = [
    "ExtensionRequestHandler",
    "ExtensionPipeline",
    "SignatureVerifier",
    "dispatch",
    "get_default_verifier",
]
