"""Pydantic models for request/response schemas."""

from .policy import DebugPath, PathPolicy, VerifiedPath
from .request import CEKRequest, IntentRequest, LaunchRequest, SessionEndedRequest, decode_request
from .response import CEKResponse, SimpleSpeech, SpeechList, SpeechSet, speech_info

__all__ = [
    "CEKRequest",
    "LaunchRequest",
    "IntentRequest",
    "SessionEndedRequest",
    "decode_request",
    "CEKResponse",
    "SimpleSpeech",
    "SpeechList",
    "SpeechSet",
    "speech_info",
    "PathPolicy",
    "VerifiedPath",
    "DebugPath",
]
