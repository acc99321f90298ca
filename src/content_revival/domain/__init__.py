"""Domain models, errors and read-only report views."""

from content_revival.domain.errors import (
    AnalysisCancelled,
    ExtractionError,
    MissingApiKeyError,
    OverlayGenerationError,
    RevivalError,
)
from content_revival.domain.models import (
    AppState,
    Frame,
    OutdatedItem,
    RevivalPlan,
    RevivalStrategy,
    Segment,
    VideoMetadata,
)

__all__ = [
    "AnalysisCancelled",
    "AppState",
    "ExtractionError",
    "Frame",
    "MissingApiKeyError",
    "OutdatedItem",
    "OverlayGenerationError",
    "RevivalError",
    "RevivalPlan",
    "RevivalStrategy",
    "Segment",
    "VideoMetadata",
]
