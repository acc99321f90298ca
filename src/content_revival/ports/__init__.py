"""Ports (interfaces) – depend on these, implement in adapters."""

from content_revival.ports.interfaces import (
    IAnalysisProvider,
    IImageEditor,
    IKeyCapability,
    IThumbnailSource,
)

__all__ = [
    "IAnalysisProvider",
    "IImageEditor",
    "IKeyCapability",
    "IThumbnailSource",
]
