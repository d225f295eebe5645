"""Routing of authenticated requests to business logic."""

import asyncio
import inspect
import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from ..errors import HandlerError
from ..models.request import CEKRequest, LaunchRequest, SessionEndedRequest
from ..models.response import CEKResponse

logger = logging.getLogger(__name__)

Respond = Callable[[CEKResponse], None]


class ExtensionRequestHandler(ABC):
    """
    Business logic for each Clova request kind.

    Launch and intent handlers receive a `respond` callback which must be
    called exactly once with the response. It may be called after the
    handler returns, from a task or another thread. Handlers may be plain
    functions, which run in a worker thread, or coroutines, which run on the
    event loop and must not block.
    """

    @abstractmethod
    def launch_handler(self, request: CEKRequest, respond: Respond) -> Awaitable[None] | None:
        """Handle a LaunchRequest."""

    @abstractmethod
    def intent_handler(self, request: CEKRequest, respond: Respond) -> Awaitable[None] | None:
        """Handle an IntentRequest."""

    def session_ended_handler(self, request: CEKRequest) -> Awaitable[None] | None:
        """Handle a SessionEndedRequest. Does nothing by default."""
        return None


class CompletionCallback:
    """One-shot `respond` callback that resolves a future on its event loop.

    A second invocation is logged and ignored.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, future: asyncio.Future) -> None:
        self._loop = loop
        self._future = future
        self._lock = threading.Lock()
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, response: CEKResponse) -> None:
        with self._lock:
            if self._fired:
                logger.warning("Response callback invoked more than once, ignoring")
                return
            self._fired = True

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._resolve(response)
            return

        try:
            self._loop.call_soon_threadsafe(self._resolve, response)
        except RuntimeError:
            # Event loop already closed, nobody is waiting for this response
            logger.warning("Response arrived after the request finished, dropping it")

    def _resolve(self, response: Any) -> None:
        if self._future.done():
            # Caller stopped waiting (timeout or disconnect)
            return
        if isinstance(response, CEKResponse):
            self._future.set_result(response)
        else:
            self._future.set_exception(
                HandlerError(f"Handler responded with {type(response).__name__}, expected CEKResponse")
            )


async def _invoke(handler_method: Callable[..., Any], *args: Any) -> None:
    try:
        if inspect.iscoroutinefunction(handler_method):
            await handler_method(*args)
            return

        # Plain handlers may block, so keep them off the event loop
        result = await asyncio.to_thread(handler_method, *args)
        if inspect.isawaitable(result):
            await result
    except Exception as e:
        logger.exception(f"{handler_method.__name__} failed")
        raise HandlerError(f"{handler_method.__name__} failed") from e


async def dispatch(request: CEKRequest, handler: ExtensionRequestHandler) -> CEKResponse | None:
    """
    Invoke the handler matching the request kind and wait for its response.

    Args:
        request: Authenticated request
        handler: Business logic

    Returns:
        The response passed to `respond`, or None for SessionEndedRequest

    Raises:
        HandlerError: If the handler raises or responds with something other
            than a CEKResponse
    """
    kind = request.request
    logger.info(f"Dispatching {kind.type}")

    if isinstance(kind, SessionEndedRequest):
        await _invoke(handler.session_ended_handler, request)
        return None

    loop = asyncio.get_running_loop()
    future: asyncio.Future = loop.create_future()
    respond = CompletionCallback(loop, future)

    if isinstance(kind, LaunchRequest):
        await _invoke(handler.launch_handler, request, respond)
    else:
        await _invoke(handler.intent_handler, request, respond)

    return await future
