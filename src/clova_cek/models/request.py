"""Clova Extension Kit request models and decoder."""

import json
import logging
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import DecodeError, UnknownRequestTypeError

logger = logging.getLogger(__name__)

LAUNCH_REQUEST = "LaunchRequest"
INTENT_REQUEST = "IntentRequest"
SESSION_ENDED_REQUEST = "SessionEndedRequest"

REQUEST_TYPES = (LAUNCH_REQUEST, INTENT_REQUEST, SESSION_ENDED_REQUEST)


class _Frozen(BaseModel):
    # No coercion: "yes" is not a bool and "640" is not an int
    model_config = ConfigDict(frozen=True, strict=True)


class CEKUser(_Frozen):
    """Clova user account."""

    userId: str
    accessToken: str | None = None


class CEKSession(_Frozen):
    """Conversation session information."""

    new: bool
    sessionAttributes: dict[str, str] | None = None
    sessionId: str
    user: CEKUser


class ContentLayer(_Frozen):
    """Drawable area of a display."""

    width: int
    height: int


class CEKDisplay(_Frozen):
    """Display geometry of the client device."""

    size: str
    orientation: str | None = None
    dpi: int | None = None
    contentLayer: ContentLayer


class CEKDevice(_Frozen):
    """Client device."""

    deviceId: str = ""
    display: CEKDisplay | None = None


class CEKApplication(_Frozen):
    """Extension identity the request was sent for."""

    applicationId: str


class CEKSystem(_Frozen):
    """System context of the client."""

    user: CEKUser
    device: CEKDevice
    # Missing from some older and Dialog-test payloads
    application: CEKApplication | None = None


class CEKContext(_Frozen):
    """Request context."""

    model_config = ConfigDict(frozen=True, strict=True, populate_by_name=True)

    system: CEKSystem = Field(..., alias="System")


class CEKSlot(_Frozen):
    """Slot value recognised in an utterance."""

    name: str
    value: str
    valueType: str | None = None


class CEKIntent(_Frozen):
    """Recognised intent with its slots."""

    name: str
    slots: dict[str, CEKSlot]


class LaunchRequest(_Frozen):
    """User started the extension."""

    type: Literal["LaunchRequest"]


class IntentRequest(_Frozen):
    """User utterance mapped to an intent."""

    type: Literal["IntentRequest"]
    intent: CEKIntent


class SessionEndedRequest(_Frozen):
    """Platform closed the session."""

    type: Literal["SessionEndedRequest"]


RequestKind = Annotated[
    Union[LaunchRequest, IntentRequest, SessionEndedRequest],
    Field(discriminator="type"),
]


class CEKRequest(_Frozen):
    """Full request envelope sent by the Clova platform."""

    version: str
    session: CEKSession
    context: CEKContext
    request: RequestKind

    @property
    def application_id(self) -> str | None:
        """applicationId from the request context, if present."""
        application = self.context.system.application
        return application.applicationId if application else None

    @property
    def intent_name(self) -> str:
        """Intent name, or an empty string for launch and session-ended requests."""
        if isinstance(self.request, IntentRequest):
            return self.request.intent.name
        return ""

    def slot_values(self) -> dict[str, str]:
        """Map of slot key to slot value, keyed like `get_slot`. Empty unless this is an intent request."""
        if not isinstance(self.request, IntentRequest):
            return {}
        return {key: slot.value for key, slot in self.request.intent.slots.items()}

    def get_slot(self, name: str) -> str | None:
        """Value of the slot keyed by `name`, or None."""
        if not isinstance(self.request, IntentRequest):
            return None
        slot = self.request.intent.slots.get(name)
        return slot.value if slot else None


def decode_request(body: bytes | str) -> CEKRequest:
    """
    Decode a raw request body into a CEKRequest.

    The `request.type` discriminator is read from the generic JSON first so
    that an unknown request kind is reported as such rather than as a
    schema mismatch.

    Args:
        body: Raw UTF-8 JSON body

    Returns:
        Decoded request

    Raises:
        UnknownRequestTypeError: If `request.type` is missing or unknown
        DecodeError: If the body is not JSON or does not match the schema
    """
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DecodeError("Body is not valid JSON") from e

    if not isinstance(payload, dict):
        raise DecodeError("Body is not a JSON object")

    request = payload.get("request")
    request_type = request.get("type") if isinstance(request, dict) else None

    if request_type not in REQUEST_TYPES:
        raise UnknownRequestTypeError(f"Unknown request type: {request_type!r}")

    try:
        return CEKRequest.model_validate_json(body)
    except ValidationError as e:
        logger.debug(f"{request_type} failed validation: {e.error_count()} error(s)")
        raise DecodeError(f"Invalid {request_type}") from e
