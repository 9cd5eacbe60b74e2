from pydantic import BaseModel, Field


class WebhookResponse(BaseModel):
    """Standardized response model for all webhook handlers."""

    status: str = Field(..., description="Processing status: ok, ignored, error")
    detail: str | None = Field(None, description="Additional context or error message")
    event_type: str | None = Field(None, description="Normalized GitHub event type")
