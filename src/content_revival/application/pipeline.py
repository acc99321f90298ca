"""
Revival pipeline – single responsibility: orchestrate resolve → context frames →
streamed analysis → report, plus the standalone overlay edit.
Depends only on port interfaces (SOLID – Dependency Inversion).
"""

import asyncio
from typing import Callable, List, Optional

from content_revival.application.extractor import StreamingReportExtractor
from content_revival.domain.errors import AnalysisCancelled, OverlayGenerationError
from content_revival.domain.models import AppState, Frame, OutdatedItem, RevivalStrategy
from content_revival.domain.report import (
    outdated_items_of,
    overlay_instruction,
    pick_overlay_frame,
    segments_of,
)
from content_revival.ports.interfaces import (
    IAnalysisProvider,
    IImageEditor,
    IKeyCapability,
    IThumbnailSource,
)

ThinkingCallback = Optional[Callable[[str], None]]


class RevivalPipeline:
    """
    Runs one analysis at a time and keeps its result for the presentation layer.
    All dependencies are injected (ports); no concrete implementations here.
    """

    def __init__(
        self,
        *,
        analysis_provider: IAnalysisProvider,
        image_editor: IImageEditor,
        thumbnail_source: IThumbnailSource,
        key_capability: Optional[IKeyCapability] = None,
    ):
        self._analysis = analysis_provider
        self._images = image_editor
        self._thumbnails = thumbnail_source
        self._keys = key_capability

        self.state = AppState.IDLE
        self.youtube_url: Optional[str] = None
        self.frames: List[Frame] = []
        self.thinking = ""
        self.strategy: Optional[RevivalStrategy] = None
        self.last_error: Optional[BaseException] = None

    def needs_key(self) -> bool:
        """True when a key capability is available but no key is selected yet."""
        return bool(self._keys and self._keys.available and not self._keys.has_key())

    def can_select_key(self) -> bool:
        return bool(self._keys and self._keys.available)

    def select_key(self) -> bool:
        if not self.can_select_key():
            return False
        return self._keys.select_key()

    def reset(self) -> None:
        """Drop the previous analysis and go back to idle."""
        self.state = AppState.IDLE
        self.youtube_url = None
        self.frames = []
        self.thinking = ""
        self.strategy = None
        self.last_error = None

    def acquire_frames(self, youtube_url: str) -> List[Frame]:
        """Thumbnail as visual context, or a placeholder frame if there is none."""
        video_id = self._thumbnails.resolve_video_id(youtube_url)
        if video_id:
            print(f"  🎬 Video id: {video_id}")
            thumbnail = self._thumbnails.fetch_thumbnail(video_id)
            if thumbnail:
                print("  ✅ Using video thumbnail as context")
                return [thumbnail]
        else:
            print("  ⚠️  Could not resolve a video id from the link")
        print("  💡 Using placeholder frame as context")
        return [self._thumbnails.placeholder_frame()]

    def analyze(self, youtube_url: str, on_thinking: ThinkingCallback = None) -> RevivalStrategy:
        """Run the full analysis. Returns the report; failures are re-raised unchanged."""
        self._start(youtube_url)
        try:
            self.frames = self.acquire_frames(youtube_url)
            self.state = AppState.ANALYZING_CONTENT
            print("\n[2/3] Analyzing with Gemini (live reasoning)...")
            extractor = StreamingReportExtractor(self._thinking_callback(on_thinking))
            strategy = extractor.consume(
                self._analysis.stream_analysis(youtube_url, self.frames)
            )
        except (AnalysisCancelled, KeyboardInterrupt):
            self._cancelled()
            raise
        except Exception as e:
            self._failed(e)
            raise
        return self._complete(strategy)

    async def aanalyze(self, youtube_url: str, on_thinking: ThinkingCallback = None) -> RevivalStrategy:
        """Async twin of analyze(); stream consumption suspends between fragments."""
        self._start(youtube_url)
        try:
            self.frames = self.acquire_frames(youtube_url)
            self.state = AppState.ANALYZING_CONTENT
            print("\n[2/3] Analyzing with Gemini (live reasoning)...")
            extractor = StreamingReportExtractor(self._thinking_callback(on_thinking))
            strategy = await extractor.aconsume(
                self._analysis.astream_analysis(youtube_url, self.frames)
            )
        except (AnalysisCancelled, asyncio.CancelledError):
            self._cancelled()
            raise
        except Exception as e:
            self._failed(e)
            raise
        return self._complete(strategy)

    def generate_overlay(
        self,
        item: OutdatedItem,
        frames: Optional[List[Frame]] = None,
    ) -> str:
        """Edit a context frame to show an update. Returns a data URL; the report is untouched."""
        frame = pick_overlay_frame(self.frames if frames is None else frames)
        if frame is None:
            raise OverlayGenerationError("No video frames available to generate overlay.")
        print(f"\n🎨 Visualizing update: {item.get('oldTool', '?')} → {item.get('newTool', '?')}")
        return self._images.edit_image(frame, overlay_instruction(item))

    def _start(self, youtube_url: str) -> None:
        if not youtube_url:
            raise ValueError("A YouTube link is required")
        self.reset()
        self.youtube_url = youtube_url
        self.state = AppState.PROCESSING_VIDEO
        print("=" * 60)
        print("Content Revival analysis")
        print("=" * 60)
        print(f"\n[1/3] Acquiring video context for {youtube_url}...")

    def _thinking_callback(self, on_thinking: ThinkingCallback) -> Callable[[str], None]:
        def handle(text: str) -> None:
            # The model reasons (and searches) inside the thinking block
            if self.state == AppState.ANALYZING_CONTENT:
                self.state = AppState.RESEARCHING
            self.thinking = text
            if on_thinking is not None:
                on_thinking(text)
        return handle

    def _complete(self, strategy: RevivalStrategy) -> RevivalStrategy:
        self.strategy = strategy
        self.state = AppState.COMPLETE
        print(
            f"\n[3/3] ✅ Report ready: {len(segments_of(strategy))} segments, "
            f"{len(outdated_items_of(strategy))} outdated items"
        )
        return strategy

    def _failed(self, error: BaseException) -> None:
        self.state = AppState.ERROR
        self.last_error = error

    def _cancelled(self) -> None:
        self.reset()
