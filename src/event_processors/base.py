from abc import ABC, abstractmethod
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field

from src.core.models import WebhookEvent


class ProcessingState(str, Enum):
    """
    Processing state for event processing results.

    - PASS: Every applicable rule is fulfilled
    - FAIL: Some rule is missing reviews
    - NEUTRAL: Nothing to evaluate (no policy file in the repository)
    - ERROR: The policy could not be evaluated
    """

    PASS = "pass"
    FAIL = "fail"
    NEUTRAL = "neutral"
    ERROR = "error"


class ProcessingResult(BaseModel):
    """Result of event processing."""

    state: ProcessingState
    reports: list[dict[str, Any]] = Field(default_factory=list)
    lookups_made: int = 0
    processing_time_ms: int
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.state == ProcessingState.PASS


class BaseEventProcessor(ABC):
    """Base class for all event processors."""

    @abstractmethod
    async def process(self, event: WebhookEvent) -> ProcessingResult:
        """Process the event."""
        raise NotImplementedError("Subclasses must implement process")
