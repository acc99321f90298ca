"""IAnalysisProvider and IImageEditor adapters backed by the Gemini API."""

import base64
from typing import Any, AsyncIterator, Iterator, List, Optional, Sequence, Tuple

from google import genai
from google.genai import types

from content_revival import config
from content_revival.domain.errors import MissingApiKeyError, OverlayGenerationError
from content_revival.domain.models import Frame
from content_revival.ports.interfaces import IAnalysisProvider, IImageEditor
from content_revival.prompts import build_analysis_prompt, build_overlay_prompt


def _client(api_key: Optional[str] = None) -> genai.Client:
    key = api_key or config.get_api_key()
    if not key:
        raise MissingApiKeyError("API Key not found")
    return genai.Client(api_key=key)


def _frame_part(frame: Frame) -> types.Part:
    return types.Part.from_bytes(
        data=base64.b64decode(frame["data"]),
        mime_type=frame["mime_type"],
    )


class GeminiAnalysisAdapter(IAnalysisProvider):
    """Streams the revival analysis, grounded with Google Search."""

    def __init__(
        self,
        model: Optional[str] = None,
        use_google_search: Optional[bool] = None,
        api_key: Optional[str] = None,
    ):
        self.model = model or config.GEMINI_MODEL
        self.use_google_search = (
            config.USE_GOOGLE_SEARCH if use_google_search is None else use_google_search
        )
        self._api_key = api_key

    def _request(
        self,
        video_url: str,
        frames: Optional[Sequence[Frame]],
    ) -> Tuple[List[Any], types.GenerateContentConfig]:
        frames = list(frames or [])
        contents: List[Any] = [_frame_part(f) for f in frames]
        contents.append(build_analysis_prompt(video_url, has_frames=bool(frames)))

        tools = []
        if self.use_google_search:
            tools.append(types.Tool(google_search=types.GoogleSearch()))
        return contents, types.GenerateContentConfig(tools=tools)

    def stream_analysis(
        self,
        video_url: str,
        frames: Optional[Sequence[Frame]] = None,
    ) -> Iterator[str]:
        client = _client(self._api_key)
        contents, request_config = self._request(video_url, frames)
        print(f"  ⏳ Streaming analysis from {self.model}...")
        for chunk in client.models.generate_content_stream(
            model=self.model,
            contents=contents,
            config=request_config,
        ):
            if chunk.text:
                yield chunk.text

    async def astream_analysis(
        self,
        video_url: str,
        frames: Optional[Sequence[Frame]] = None,
    ) -> AsyncIterator[str]:
        client = _client(self._api_key)
        contents, request_config = self._request(video_url, frames)
        print(f"  ⏳ Streaming analysis from {self.model} (async)...")
        stream = await client.aio.models.generate_content_stream(
            model=self.model,
            contents=contents,
            config=request_config,
        )
        async for chunk in stream:
            if chunk.text:
                yield chunk.text


def _response_parts(response: Any) -> List[Any]:
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []
    content = getattr(candidates[0], "content", None)
    return list(getattr(content, "parts", None) or [])


class GeminiImageEditAdapter(IImageEditor):
    """Edits a video frame to show the modern replacement for an outdated tool."""

    def __init__(self, model: Optional[str] = None, api_key: Optional[str] = None):
        self.model = model or config.GEMINI_IMAGE_MODEL
        self._api_key = api_key

    def edit_image(self, frame: Frame, instruction: str) -> str:
        client = _client(self._api_key)
        print(f"  🎨 Generating overlay with {self.model}...")
        response = client.models.generate_content(
            model=self.model,
            contents=[_frame_part(frame), build_overlay_prompt(instruction)],
        )

        for part in _response_parts(response):
            inline = getattr(part, "inline_data", None)
            mime_type = getattr(inline, "mime_type", None) or ""
            if inline is not None and mime_type.startswith("image/"):
                data = inline.data
                if isinstance(data, bytes):
                    data = base64.b64encode(data).decode("ascii")
                print(f"  ✅ Overlay generated ({mime_type})")
                return f"data:{mime_type};base64,{data}"

        raise OverlayGenerationError("No image generated")
