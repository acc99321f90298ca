"""
Port interfaces (SOLID – Dependency Inversion).
Implement these in adapters; the application layer depends only on these abstractions.
"""

from abc import ABC, abstractmethod
from typing import AsyncIterator, Iterator, Optional, Sequence

from content_revival.domain.models import Frame


class IAnalysisProvider(ABC):
    """Generative analysis of a video, streamed back as text fragments."""

    @abstractmethod
    def stream_analysis(
        self,
        video_url: str,
        frames: Optional[Sequence[Frame]] = None,
    ) -> Iterator[str]:
        """Yield text deltas until the provider closes the stream."""
        pass

    def astream_analysis(
        self,
        video_url: str,
        frames: Optional[Sequence[Frame]] = None,
    ) -> AsyncIterator[str]:
        """Async twin of stream_analysis (optional)."""
        raise NotImplementedError("Adapter does not support async streaming")


class IImageEditor(ABC):
    """Edit one image according to an instruction."""

    @abstractmethod
    def edit_image(self, frame: Frame, instruction: str) -> str:
        """Return the edited image as a data URL; raise if none was produced."""
        pass


class IThumbnailSource(ABC):
    """Video reference resolution and visual context for a video."""

    @abstractmethod
    def resolve_video_id(self, url: str) -> Optional[str]:
        """Platform video id for a URL, or None if it cannot be resolved."""
        pass

    @abstractmethod
    def fetch_thumbnail(self, video_id: str) -> Optional[Frame]:
        """Fetch the video's thumbnail, or None if unavailable."""
        pass

    @abstractmethod
    def placeholder_frame(self) -> Frame:
        """Generic frame used when no thumbnail can be had."""
        pass


class IKeyCapability(ABC):
    """
    Host key management. Two variants: Available (can report and select a key)
    and Unavailable (nothing to manage; the environment key is assumed).
    """

    available: bool = False

    @abstractmethod
    def has_key(self) -> bool:
        pass

    @abstractmethod
    def select_key(self) -> bool:
        """Let the user pick a key. Returns True once one is assumed selected."""
        pass
