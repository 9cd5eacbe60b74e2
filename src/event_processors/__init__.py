from src.event_processors.base import BaseEventProcessor, ProcessingResult, ProcessingState
from src.event_processors.pull_request.processor import ReviewPolicyProcessor

__all__ = [
    "BaseEventProcessor",
    "ProcessingResult",
    "ProcessingState",
    "ReviewPolicyProcessor",
]
