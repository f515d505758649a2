"""
FastAPI application relaying background retouch requests to Fal (Nano Banana Pro).
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from clients import FalEditClient, RetouchError
from config import Settings, get_settings
from models import ErrorResponse, HealthResponse, RetouchRequest, RetouchResponse
from services import RetouchService

logging.basicConfig(
    level=get_settings().log_level.upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SERVICE_MESSAGE = "Nano Banana proxy is running"


def get_fal_client(settings: Settings = Depends(get_settings)) -> FalEditClient:
    return FalEditClient(
        api_key=settings.fal_key,
        endpoint_url=settings.fal_endpoint_url,
        timeout_seconds=settings.fal_timeout_seconds,
    )


def get_service(client: FalEditClient = Depends(get_fal_client)) -> RetouchService:
    return RetouchService(client=client)


class BodyTooLargeError(Exception):
    pass


class BodySizeLimitMiddleware:
    """
    Reject request bodies larger than ``max_body_bytes``.

    The declared Content-Length is checked up front; chunked bodies are counted
    as they are received and the app's response is replaced by a 413 once the
    running total passes the limit.
    """

    def __init__(self, app: ASGIApp, max_body_bytes: int):
        self.app = app
        self.max_body_bytes = max_body_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        length = Headers(scope=scope).get("content-length")
        if length and length.isdigit() and int(length) > self.max_body_bytes:
            await self._reject(scope, receive, send, length)
            return

        received = 0
        exceeded = False
        response_started = False

        async def limited_receive() -> Message:
            nonlocal received, exceeded
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_body_bytes:
                    exceeded = True
                    raise BodyTooLargeError(f"body exceeds {self.max_body_bytes} bytes")
            return message

        async def guarded_send(message: Message) -> None:
            nonlocal response_started
            if exceeded:
                return
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, limited_receive, guarded_send)
        except Exception:
            if not exceeded or response_started:
                raise
        if exceeded and not response_started:
            await self._reject(scope, receive, send, f">{self.max_body_bytes}")

    async def _reject(self, scope: Scope, receive: Receive, send: Send, length: str) -> None:
        logger.warning("Rejected %s %s: body of %s bytes", scope.get("method"), scope.get("path"), length)
        response = _error_response(413, ErrorResponse(error="Request body too large"))
        await response(scope, receive, send)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    s = get_settings()
    if s.has_fal_key:
        logger.info("FAL_KEY is set (hidden).")
    else:
        logger.error("FAL_KEY is not set in environment variables.")
    logger.info("Retouch relay starting (endpoint=%s)", s.fal_endpoint_url)
    yield
    logger.info("Retouch relay shutting down")


app = FastAPI(
    title="Retouch Relay – Nano Banana Pro proxy",
    description="Swap portrait backgrounds by relaying to Fal",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=get_settings().max_body_bytes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    content = {"error": body.error}
    if body.details is not None:
        content["details"] = jsonable_encoder(body.details)
    return JSONResponse(status_code=status_code, content=content)


@app.exception_handler(RetouchError)
async def retouch_error_handler(request: Request, exc: RetouchError) -> JSONResponse:
    return _error_response(exc.status_code, ErrorResponse(error=exc.error, details=exc.details))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.error("Invalid request body on %s: %s", request.url.path, exc.errors())
    return _error_response(
        400, ErrorResponse(error="Invalid request body", details=jsonable_encoder(exc.errors()))
    )


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Uncaught error in %s: %s", request.url.path, exc)
    return _error_response(
        500, ErrorResponse(error=f"Unexpected server error in {request.url.path}", details=str(exc))
    )


# ── Routes ───────────────────────────────────────────────────

@app.get("/")
async def index(settings: Settings = Depends(get_settings)) -> JSONResponse:
    body = HealthResponse(message=SERVICE_MESSAGE, has_fal_key=settings.has_fal_key)
    return JSONResponse(body.model_dump(by_alias=True))


@app.get("/health")
async def health() -> JSONResponse:
    """Lightweight health endpoint for uptime checks."""
    return JSONResponse({"status": "ok"})


@app.post("/retouch")
async def retouch(
    payload: Optional[RetouchRequest] = None,
    service: RetouchService = Depends(get_service),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    try:
        result = await service.retouch(payload or RetouchRequest())
    except RetouchError:
        raise
    except Exception as e:
        logger.exception("Uncaught error in /retouch: %s", e)
        raise RetouchError("Unexpected server error in /retouch", details=str(e)) from e

    fields = {"image_url": result.image_url}
    if settings.echo_metadata:
        fields.update(
            prompt=result.prompt,
            resolution=result.resolution.value,
            background_id=result.background_id,
            requested_at=result.requested_at,
            completed_at=result.completed_at,
        )
    response = RetouchResponse(**fields)
    return JSONResponse(response.model_dump(mode="json", by_alias=True, exclude_none=True))


if __name__ == "__main__":
    import uvicorn

    s = get_settings()
    uvicorn.run(app, host=s.host, port=s.port)
