"""Application layer – stream extraction and pipeline orchestration."""

from content_revival.application.extractor import StreamingReportExtractor
from content_revival.application.pipeline import RevivalPipeline

__all__ = ["RevivalPipeline", "StreamingReportExtractor"]
