"""Authentication pipeline for inbound extension requests.

Flow for each request:
1. Look up the path policy for the request path (unregistered -> 401)
2. Read the body as UTF-8 text (-> 400)
3. Verify SignatureCEK over the raw body, if the path requires it (-> 401)
4. Decode the body into a CEKRequest (-> 400)
5. Match the decoded applicationId, if the path requires it (-> 401)
6. Dispatch to the handler (handler failure -> 400)

The applicationId check always reads the decoded, already verified body.
"""

import logging
from collections.abc import Mapping
from enum import Enum

from ..errors import DecodeError, HandlerError, RequestRejected, VerificationError
from ..models.policy import PathPolicy
from ..models.request import CEKRequest, decode_request
from ..models.response import CEKResponse
from .dispatcher import ExtensionRequestHandler, dispatch
from .signature import SignatureVerifier, get_default_verifier, get_signature_header

logger = logging.getLogger(__name__)

BAD_REQUEST = 400
UNAUTHORIZED = 401


class PipelineState(str, Enum):
    """Stages a request passes through before dispatch."""

    RECEIVED_BYTES = "received_bytes"
    BODY_READABLE = "body_readable"
    SIGNATURE_CHECKED = "signature_checked"
    BODY_DECODED = "body_decoded"
    APPLICATION_AUTHORIZED = "application_authorized"
    DISPATCHABLE = "dispatchable"
    REJECTED = "rejected"


def _reject(path: str, state: PipelineState, status_code: int, reason: str) -> RequestRejected:
    logger.warning(f"Rejected request on {path} at {state.value}: {status_code} {reason}")
    return RequestRejected(status_code, reason)


class ExtensionPipeline:
    """Authenticates, decodes and dispatches requests for registered paths."""

    def __init__(
        self,
        policy: PathPolicy,
        handler: ExtensionRequestHandler,
        verifier: SignatureVerifier | None = None,
    ) -> None:
        self.policy = policy
        self.handler = handler
        self.verifier = verifier or get_default_verifier()

    def authenticate(self, path: str, body: bytes, headers: Mapping[str, str]) -> CEKRequest:
        """
        Run every check up to the dispatchable state.

        Args:
            path: Request path, matched exactly against the policy
            body: Raw request body
            headers: Request headers

        Returns:
            Validated request

        Raises:
            RequestRejected: With status 400 or 401
        """
        entry = self.policy.lookup(path)
        if entry is None:
            raise _reject(path, PipelineState.REJECTED, UNAUTHORIZED, "unregistered path")

        state = PipelineState.RECEIVED_BYTES
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError:
            raise _reject(path, state, BAD_REQUEST, "body is not UTF-8 text")
        state = PipelineState.BODY_READABLE

        if entry.requires_verification:
            try:
                self.verifier.verify(body, get_signature_header(headers))
            except VerificationError:
                raise _reject(path, state, UNAUTHORIZED, "invalid signature")
            state = PipelineState.SIGNATURE_CHECKED

        try:
            request = decode_request(text)
        except DecodeError as e:
            raise _reject(path, state, BAD_REQUEST, f"undecodable body ({type(e).__name__})")
        state = PipelineState.BODY_DECODED

        if entry.requires_verification:
            if not self.policy.authorize(path, request.application_id):
                raise _reject(path, state, UNAUTHORIZED, "applicationId mismatch")
            state = PipelineState.APPLICATION_AUTHORIZED

        logger.debug(f"Request on {path} reached {PipelineState.DISPATCHABLE.value} from {state.value}")
        return request

    async def process(self, path: str, body: bytes, headers: Mapping[str, str]) -> CEKResponse | None:
        """
        Authenticate a request and hand it to the handler.

        Returns:
            Response to serialize, or None when there is nothing to send back

        Raises:
            RequestRejected: With status 400 or 401
        """
        request = self.authenticate(path, body, headers)

        try:
            return await dispatch(request, self.handler)
        except HandlerError:
            raise _reject(path, PipelineState.DISPATCHABLE, BAD_REQUEST, "handler failed")
