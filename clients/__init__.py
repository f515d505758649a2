from .fal_edit_client import (
    FalEditClient,
    RetouchError,
    UpstreamError,
    UpstreamParseError,
    UpstreamShapeError,
    extract_image_url,
)

__all__ = [
    "FalEditClient",
    "RetouchError",
    "UpstreamError",
    "UpstreamParseError",
    "UpstreamShapeError",
    "extract_image_url",
]
