"""Clova extension webhook endpoints."""

import asyncio
import logging
from typing import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse

from ..errors import RequestRejected
from ..models.response import CEKResponse
from ..services.pipeline import BAD_REQUEST, ExtensionPipeline

logger = logging.getLogger(__name__)


async def _wait(result: Awaitable[CEKResponse | None], timeout: float | None) -> CEKResponse | None:
    if not timeout:
        return await result
    try:
        return await asyncio.wait_for(result, timeout)
    except asyncio.TimeoutError:
        logger.error(f"No response from handler within {timeout}s")
        raise RequestRejected(BAD_REQUEST, "handler timed out")


def _make_endpoint(
    path: str,
    pipeline: ExtensionPipeline,
    timeout: float | None,
) -> Callable[[Request], Awaitable[Response]]:
    async def extension_webhook(request: Request) -> Response:
        """
        Handle Clova extension requests.

        The body is authenticated according to the path policy, decoded and
        dispatched to the extension handler. Rejected requests get an empty
        400 or 401 response. SessionEndedRequest gets an empty 200 response.
        """
        body = await request.body()

        try:
            response = await _wait(pipeline.process(path, body, request.headers), timeout)
        except RequestRejected as e:
            return Response(status_code=e.status_code)

        if response is None:
            return Response(status_code=200)

        return JSONResponse(response.to_dict())

    return extension_webhook


def create_router(pipeline: ExtensionPipeline, timeout: float | None = None) -> APIRouter:
    """Register a POST endpoint for every path in the pipeline's policy."""
    router = APIRouter(tags=["extension"])

    for entry in pipeline.policy.entries:
        route_path = entry.path if entry.path.startswith("/") else f"/{entry.path}"
        router.add_api_route(
            route_path,
            _make_endpoint(entry.path, pipeline, timeout),
            methods=["POST"],
            name=f"extension:{route_path}",
        )
        mode = "with verification" if entry.requires_verification else "without verification"
        logger.info(f"Registered extension path {route_path} {mode}")

    return router
