from .prompts import DEFAULT_PROMPT, PROMPTS, resolve_prompt
from .resolution import Resolution, normalize_resolution
from .retouch import (
    ConfigurationError,
    MissingImageError,
    InvalidRequestError,
    RetouchResult,
    RetouchService,
)

__all__ = [
    "ConfigurationError",
    "DEFAULT_PROMPT",
    "MissingImageError",
    "PROMPTS",
    "InvalidRequestError",
    "Resolution",
    "RetouchResult",
    "RetouchService",
    "normalize_resolution",
    "resolve_prompt",
]
