"""Demonstration extension handlers."""

import logging

from ..models.request import CEKRequest
from ..models.response import CEKResponse
from .dispatcher import ExtensionRequestHandler, Respond

logger = logging.getLogger(__name__)

LANG = "en"


def _speech(text: str, should_end: bool = True, reprompt: str | None = None) -> CEKResponse:
    return CEKResponse.simple_speech(text, should_end_session=should_end, reprompt=reprompt, lang=LANG)


class DemoRequestHandler(ExtensionRequestHandler):
    """
    Echo extension.

    Supported requests:
    - LaunchRequest: Welcome message
    - EchoIntent: Read back the recognised slot values
    - Clova.GuideIntent: Usage instructions
    - Clova.CancelIntent: Exit
    - SessionEndedRequest: Nothing to do
    """

    def launch_handler(self, request: CEKRequest, respond: Respond) -> None:
        respond(
            _speech(
                "Welcome to Echo. Say something and I will repeat it.",
                should_end=False,
                reprompt="Say something and I will repeat it.",
            )
        )

    def intent_handler(self, request: CEKRequest, respond: Respond) -> None:
        intent_name = request.intent_name
        logger.info(f"Intent: {intent_name}")

        if intent_name == "EchoIntent":
            respond(self._echo(request))
            return

        if intent_name == "Clova.GuideIntent":
            respond(_speech("Say anything, like: hello, and I will say it back.", should_end=False))
            return

        if intent_name == "Clova.CancelIntent":
            respond(_speech("Goodbye!"))
            return

        respond(_speech("I didn't understand that."))

    def session_ended_handler(self, request: CEKRequest) -> None:
        logger.info(f"Session ended: {request.session.sessionId}")

    def _echo(self, request: CEKRequest) -> CEKResponse:
        values = [value for value in request.slot_values().values() if value]

        if not values:
            return _speech("I didn't catch that. Please say it again.", should_end=False)

        return CEKResponse.simple_speech(
            ", ".join(values),
            should_end_session=False,
            session_attributes={"lastEcho": ", ".join(values)},
            lang=LANG,
        )
