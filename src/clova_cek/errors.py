"""Errors raised while authenticating and dispatching extension requests."""


class CEKError(Exception):
    """Base class for extension request errors."""


class DecodeError(CEKError):
    """Request body is not valid JSON or does not match the request schema."""


class UnknownRequestTypeError(DecodeError):
    """Request `type` discriminator is missing or not a known request kind."""


class VerificationError(CEKError):
    """Request could not be authenticated.

    Deliberately carries no detail about which step failed.
    """

    def __init__(self) -> None:
        super().__init__("Request verification failed")


class HandlerError(CEKError):
    """Business logic failed to produce a response."""


class PublicKeyError(CEKError):
    """Trusted public key could not be loaded."""


class RequestRejected(CEKError):
    """Terminal pipeline outcome mapped to an HTTP status."""

    def __init__(self, status_code: int, reason: str) -> None:
        super().__init__(reason)
        self.status_code = status_code
        self.reason = reason
