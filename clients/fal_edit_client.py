"""
fal.ai Nano Banana Pro edit client.

Contract (POST https://fal.run/fal-ai/nano-banana-pro/edit):
    request:  {prompt, num_images, aspect_ratio, output_format, image_urls, resolution}
    response: {images: [{url, file_name, content_type}], ...}
"""
import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)


class RetouchError(Exception):
    status_code = 500
    error = "Retouch failed"

    def __init__(self, error: Optional[str] = None, details: Any = None):
        self.error = error or self.error
        self.details = details
        super().__init__(self.error)


class UpstreamError(RetouchError):
    error = "Nano Banana Pro processing failed"

    def __init__(self, details: Any = None, upstream_status: Optional[int] = None):
        super().__init__(details=details)
        self.upstream_status = upstream_status


class UpstreamParseError(RetouchError):
    error = "Invalid JSON from Fal"


class UpstreamShapeError(RetouchError):
    error = "No image URL returned from Fal"


def _first_url(items: Any) -> Any:
    if isinstance(items, list) and items and isinstance(items[0], dict):
        return items[0].get("url")
    return None


# Checked in order; the first non-empty string wins.
IMAGE_URL_EXTRACTORS: Tuple[Callable[[Dict[str, Any]], Any], ...] = (
    lambda data: data.get("image_url"),
    lambda data: data.get("url"),
    lambda data: _first_url(data.get("images")),
    lambda data: _first_url(data.get("output")),
)


def extract_image_url(data: Any) -> Optional[str]:
    if not isinstance(data, dict):
        return None
    for extractor in IMAGE_URL_EXTRACTORS:
        value = extractor(data)
        if isinstance(value, str) and value:
            return value
    return None


class FalEditClient:
    DEFAULT_NUM_IMAGES = 1
    DEFAULT_ASPECT_RATIO = "auto"
    DEFAULT_OUTPUT_FORMAT = "png"

    def __init__(
        self,
        api_key: str,
        endpoint_url: str,
        timeout_seconds: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.endpoint_url = endpoint_url
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Authorization": f"Key {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, prompt: str, resolution: str, image: str) -> Dict[str, Any]:
        """Request body for the /edit endpoint. The data URI is passed through as-is."""
        return {
            "prompt": prompt,
            "num_images": self.DEFAULT_NUM_IMAGES,
            "aspect_ratio": self.DEFAULT_ASPECT_RATIO,
            "output_format": self.DEFAULT_OUTPUT_FORMAT,
            "image_urls": [image],
            "resolution": resolution,
        }

    async def edit(self, prompt: str, resolution: str, image: str) -> str:
        """Submit one edit request and return the result image URL. No retries."""
        payload = self.build_payload(prompt, resolution, image)
        logger.info("Calling Fal endpoint: %s", self.endpoint_url)
        logger.debug(
            "Fal request body (image hidden): %s",
            {**payload, "image_urls": ["[base64-data-uri]"]},
        )
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_seconds, transport=self._transport, follow_redirects=True
            ) as client:
                r = await client.post(self.endpoint_url, json=payload, headers=self._headers())
        except httpx.RequestError as e:
            logger.error("Fal request failed: %s", e)
            raise UpstreamError(details=str(e)) from e

        text = r.text
        logger.info("Fal response status: %s", r.status_code)
        logger.debug("Fal response body: %s", text)

        if r.status_code < 200 or r.status_code >= 300:
            logger.error("Fal API error %s: %s", r.status_code, text[:500])
            raise UpstreamError(details=text, upstream_status=r.status_code)

        return self.parse_response(text)

    @staticmethod
    def parse_response(text: str) -> str:
        """Parse the raw response body and pull out the image URL."""
        try:
            data = json.loads(text) if text else {}
        except ValueError as e:
            logger.error("Failed to parse Fal JSON: %s", e)
            raise UpstreamParseError(details={"parseError": str(e), "raw": text}) from e

        image_url = extract_image_url(data)
        if not image_url:
            logger.error("No image URL in Fal response: %s", data)
            raise UpstreamShapeError(details=data)
        return image_url
