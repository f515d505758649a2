"""
Retouch service – validates a request, picks the prompt and resolution, and
relays a single edit call to Fal.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from clients.fal_edit_client import FalEditClient, RetouchError
from models import RetouchRequest

from .prompts import resolve_prompt
from .resolution import Resolution, normalize_resolution

logger = logging.getLogger(__name__)


class ConfigurationError(RetouchError):
    error = "Server configuration error"


class InvalidRequestError(RetouchError):
    status_code = 400
    error = "Invalid request body"


class MissingImageError(InvalidRequestError):
    error = "imageBase64 is required"


@dataclass(frozen=True)
class RetouchResult:
    image_url: str
    prompt: str
    resolution: Resolution
    background_id: Optional[str]
    requested_at: datetime
    completed_at: datetime


class RetouchService:
    def __init__(self, client: FalEditClient):
        self.client = client

    def validate(self, request: RetouchRequest) -> str:
        """Credential first, then image. Returns the image payload."""
        if not (self.client.api_key or "").strip():
            logger.error("FAL_KEY missing.")
            raise ConfigurationError(details="FAL_KEY missing")
        if not request.image_base64:
            logger.error("imageBase64 is missing in request body.")
            raise MissingImageError()
        return request.image_base64

    async def retouch(self, request: RetouchRequest) -> RetouchResult:
        requested_at = datetime.now(timezone.utc)
        image = self.validate(request)

        prompt = resolve_prompt(request.prompt_override, request.background_id, request.prompt)
        resolution = normalize_resolution(request.resolution_hint)
        logger.info(
            "Normalized resolution: %s from hint: %r", resolution.value, request.resolution_hint
        )
        logger.info(
            "Incoming /retouch request",
            extra={
                "background_id": request.background_id,
                "resolution": resolution.value,
                "image_length": len(image),
            },
        )

        image_url = await self.client.edit(prompt, resolution.value, image)
        logger.info("Returning imageUrl to client: %s", image_url)
        return RetouchResult(
            image_url=image_url,
            prompt=prompt,
            resolution=resolution,
            background_id=request.background_id,
            requested_at=requested_at,
            completed_at=datetime.now(timezone.utc),
        )
