"""YouTube helpers: video id resolver and IThumbnailSource adapter."""

import base64
import io
import re
from typing import Optional

import requests
from PIL import Image, ImageDraw, ImageFont

from content_revival import config
from content_revival.domain.models import Frame
from content_revival.ports.interfaces import IThumbnailSource

_VIDEO_ID = re.compile(r"^.*(youtu\.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*")


def get_youtube_video_id(url: str) -> Optional[str]:
    """Extract the 11-character video id from a YouTube URL, or None."""
    if not url:
        return None
    match = _VIDEO_ID.match(url.strip())
    if match and len(match.group(2)) == 11:
        return match.group(2)
    return None


def generate_placeholder_frame(
    width: int = config.PLACEHOLDER_WIDTH,
    height: int = config.PLACEHOLDER_HEIGHT,
) -> Frame:
    """Dark 16:9 JPEG with a 'Video Content' label."""
    img = Image.new("RGB", (width, height), color="#18181b")
    draw = ImageDraw.Draw(img)

    try:
        font = ImageFont.truetype("DejaVuSans-Bold.ttf", 48)
    except OSError:
        font = ImageFont.load_default()

    text = "Video Content"
    bbox = draw.textbbox((0, 0), text, font=font)
    text_width = bbox[2] - bbox[0]
    text_height = bbox[3] - bbox[1]
    position = ((width - text_width) // 2, (height - text_height) // 2)
    draw.text(position, text, fill="#4f46e5", font=font)

    buffer = io.BytesIO()
    img.save(buffer, format="JPEG")
    return {
        "mime_type": "image/jpeg",
        "data": base64.b64encode(buffer.getvalue()).decode("ascii"),
    }


class YouTubeThumbnailAdapter(IThumbnailSource):
    """Fetches maxresdefault.jpg as the visual context for the analysis."""

    def __init__(self, timeout: Optional[int] = None):
        self._timeout = timeout or config.THUMBNAIL_TIMEOUT

    def resolve_video_id(self, url: str) -> Optional[str]:
        return get_youtube_video_id(url)

    def fetch_thumbnail(self, video_id: str) -> Optional[Frame]:
        url = config.THUMBNAIL_URL.format(video_id=video_id)
        try:
            response = requests.get(url, timeout=self._timeout)
        except requests.RequestException as e:
            print(f"  ⚠️  Failed to fetch thumbnail: {e}")
            return None

        if response.status_code != 200:
            print(f"  ⚠️  Thumbnail not available (status: {response.status_code})")
            return None

        mime_type = response.headers.get("Content-Type", "").split(";")[0].strip()
        if not mime_type.startswith("image/"):
            mime_type = "image/jpeg"
        return {
            "mime_type": mime_type,
            "data": base64.b64encode(response.content).decode("ascii"),
        }

    def placeholder_frame(self) -> Frame:
        return generate_placeholder_frame()
