"""
Background style prompts.

Every prompt asks the model to keep the subject untouched and only rework the
background and lighting.
"""
import logging
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

DEFAULT_BACKGROUND_ID = "studioSoft"

PROMPTS: Mapping[str, str] = MappingProxyType(
    {
        "studioSoft": (
            "Retouch the uploaded portrait into a soft, clean studio look with a light gradient backdrop. "
            "Do not change the person's face, pose, expression, or clothing. "
            "Only adjust background, lighting, and overall mood."
        ),
        "taekwondo": (
            "Create a high-energy Taekwondo Photo Day background with dynamic lighting, motion streaks, "
            "and subtle sparks. Do not change the subject's face, pose, or uniform. "
            "Only modify the background and lighting."
        ),
        "holiday": (
            "Transform the background into a warm holiday studio with subtle lights and seasonal mood. "
            "Keep the face, pose, and clothing as they are. "
            "Only adjust background, colors, and lighting."
        ),
        "cleanMono": (
            "Use a simple, modern single-color studio wall background. "
            "Keep the person's face, expression, and pose exactly the same, "
            "only cleaning up the background and lighting."
        ),
    }
)

DEFAULT_PROMPT = PROMPTS[DEFAULT_BACKGROUND_ID]


def _clean(text: Optional[str]) -> str:
    return text.strip() if isinstance(text, str) else ""


def resolve_prompt(
    override: Optional[str] = None,
    background_id: Optional[str] = None,
    prompt: Optional[str] = None,
) -> str:
    """
    Pick the instruction sent upstream.

    A non-empty override wins (``promptOverride`` before ``prompt``), then the
    table entry for ``background_id``, then the studioSoft default. Unknown
    styles never fail the request.
    """
    for candidate in (override, prompt):
        cleaned = _clean(candidate)
        if cleaned:
            return cleaned
    if background_id in PROMPTS:
        return PROMPTS[background_id]
    if background_id:
        logger.info("Unknown backgroundId %r, using %s prompt", background_id, DEFAULT_BACKGROUND_ID)
    return DEFAULT_PROMPT
