"""Clova Extension Kit response models."""

from typing import Annotated, Any, Literal, Union
from urllib.parse import urlsplit

from pydantic import BaseModel, Field

RESPONSE_VERSION = "0.1.0"
DEFAULT_LANG = "ja"


class PlainTextSpeech(BaseModel):
    """Sentence to be read out by the speaker."""

    type: Literal["PlainText"] = "PlainText"
    lang: str = DEFAULT_LANG
    value: str


class UrlSpeech(BaseModel):
    """Audio file to be played by the speaker."""

    type: Literal["URL"] = "URL"
    lang: Literal[""] = ""
    value: str


SpeechInfoObject = Annotated[Union[PlainTextSpeech, UrlSpeech], Field(discriminator="type")]


class SimpleSpeech(BaseModel):
    """A single sentence or audio file."""

    type: Literal["SimpleSpeech"] = "SimpleSpeech"
    values: SpeechInfoObject


class SpeechList(BaseModel):
    """Sentences and audio files played in order."""

    type: Literal["SpeechList"] = "SpeechList"
    values: list[SpeechInfoObject]


SpeechInfo = Annotated[Union[SimpleSpeech, SpeechList], Field(discriminator="type")]


class SpeechSet(BaseModel):
    """Brief and verbose renditions of the same speech."""

    type: Literal["SpeechSet"] = "SpeechSet"
    brief: SpeechInfoObject
    verbose: SpeechInfo


OutputSpeech = Annotated[Union[SimpleSpeech, SpeechList, SpeechSet], Field(discriminator="type")]


def _is_url(value: str) -> bool:
    if not value or any(char.isspace() for char in value):
        return False
    parts = urlsplit(value)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


def speech_info(text_or_url: str, lang: str = DEFAULT_LANG) -> PlainTextSpeech | UrlSpeech:
    """
    Build a speech item from a sentence or an audio URL.

    Returns a URL item when `text_or_url` is an absolute http(s) URL,
    otherwise a plain text item in `lang`.
    """
    if _is_url(text_or_url):
        return UrlSpeech(value=text_or_url)
    return PlainTextSpeech(lang=lang, value=text_or_url)


def simple_speech(item: PlainTextSpeech | UrlSpeech) -> SimpleSpeech:
    """Wrap a single speech item."""
    return SimpleSpeech(values=item)


def speech_list(items: list[PlainTextSpeech | UrlSpeech]) -> SpeechList:
    """Wrap speech items to be played in order."""
    return SpeechList(values=items)


class Reprompt(BaseModel):
    """Speech played when the user does not answer."""

    outputSpeech: OutputSpeech


class Card(BaseModel):
    """Placeholder for the `card` key."""


class DirectiveHeader(BaseModel):
    """Directive header."""

    messageId: str = ""
    name: str = ""
    namespace: str = ""


class Directive(BaseModel):
    """Client directive."""

    header: DirectiveHeader = Field(default_factory=DirectiveHeader)
    payload: str = ""


class CEKResponseBody(BaseModel):
    """Contents of the `response` key."""

    outputSpeech: OutputSpeech
    reprompt: Reprompt | None = None
    card: Card = Field(default_factory=Card)
    directives: list[Directive] = Field(default_factory=list)
    shouldEndSession: bool = False


class CEKResponse(BaseModel):
    """Full response envelope returned to the Clova platform."""

    version: str = RESPONSE_VERSION
    sessionAttributes: dict[str, str] = Field(default_factory=dict)
    response: CEKResponseBody

    @classmethod
    def simple_speech(
        cls,
        text_or_url: str,
        should_end_session: bool,
        session_attributes: dict[str, str] | None = None,
        reprompt: str | None = None,
        lang: str = DEFAULT_LANG,
    ) -> "CEKResponse":
        """
        Create a `SimpleSpeech` response with a sentence or an audio URL.

        Args:
            text_or_url: Sentence to read out, or URL of an audio file to play
            should_end_session: Pass False to keep the conversation going
            session_attributes: Attributes echoed back in the next request
            reprompt: Sentence or URL played when the user does not answer
            lang: Language of plain text speech

        Returns:
            Response envelope
        """
        body = CEKResponseBody(
            outputSpeech=simple_speech(speech_info(text_or_url, lang)),
            reprompt=(
                Reprompt(outputSpeech=simple_speech(speech_info(reprompt, lang)))
                if reprompt is not None
                else None
            ),
            shouldEndSession=should_end_session,
        )
        return cls(response=body, sessionAttributes=session_attributes or {})

    def to_dict(self) -> dict[str, Any]:
        """Serialize for the wire. An absent reprompt is omitted."""
        return self.model_dump(mode="json", exclude_none=True)
