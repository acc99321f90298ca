"""Domain models – dict-compatible, keyed exactly as the model's JSON."""

from enum import Enum
from typing import List, TypedDict


class VideoMetadata(TypedDict, total=False):
    """What the model found out about the original upload."""
    title: str
    publishDate: str
    currentViews: int


class Segment(TypedDict, total=False):
    """A chronological slice of the source video."""
    startTime: str  # 'HH:MM:SS' or 'MM:SS'
    endTime: str
    summary: str
    subjects: List[str]
    needsUpdate: bool


class OutdatedItem(TypedDict, total=False):
    """A tool or practice the video teaches that has since been replaced."""
    subject: str
    oldTool: str
    newTool: str
    reason: str
    impactScore: int  # 1-10, not validated
    affectedSegmentIndices: List[int]  # may point past the end of segments


class RevivalPlan(TypedDict, total=False):
    title: str
    description: str
    scriptOutline: str  # markdown


class RevivalStrategy(TypedDict, total=False):
    """Full report for one analysis. Read-only once returned."""
    originalVideoMetadata: VideoMetadata
    segments: List[Segment]
    outdatedItems: List[OutdatedItem]
    revivalPlan: RevivalPlan
    revivalSummary: str
    predictedViews: int
    predictedEngagement: int  # displayed out of 100


class Frame(TypedDict):
    """A visual context image, base64 encoded."""
    mime_type: str
    data: str


class AppState(Enum):
    IDLE = "idle"
    PROCESSING_VIDEO = "processing_video"
    ANALYZING_CONTENT = "analyzing_content"
    RESEARCHING = "researching"
    COMPLETE = "complete"
    ERROR = "error"
