from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RetouchRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    image_base64: Optional[str] = Field(
        default=None, alias="imageBase64", description="Data URI or base64-encoded image"
    )
    background_id: Optional[str] = Field(
        default=None, alias="backgroundId", description="Background style identifier"
    )
    resolution_hint: Optional[str] = Field(
        default=None, alias="resolutionHint", description="Free-form resolution hint, e.g. '2K'"
    )
    prompt_override: Optional[str] = Field(default=None, alias="promptOverride")
    prompt: Optional[str] = None

    @field_validator("background_id", "resolution_hint", mode="before")
    @classmethod
    def _stringify_scalar(cls, value: Any) -> Any:
        # Clients sometimes send 2, 4 or a numeric style id; unknown styles fall back later
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


class RetouchResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(..., alias="imageUrl", description="URL of the retouched image")
    prompt: Optional[str] = None
    resolution: Optional[str] = None
    background_id: Optional[str] = Field(default=None, alias="backgroundId")
    requested_at: Optional[datetime] = Field(default=None, alias="requestedAt")
    completed_at: Optional[datetime] = Field(default=None, alias="completedAt")


class ErrorResponse(BaseModel):
    error: str
    details: Optional[Any] = None


class HealthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool = True
    message: str
    has_fal_key: bool = Field(..., alias="hasFalKey")
