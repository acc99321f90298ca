import os
from dotenv import load_dotenv

load_dotenv()

# Gemini Configuration
# Key is read at call time (see get_api_key) so a key selected mid-session is picked up
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-pro-preview")  # Analysis + Google Search grounding
GEMINI_IMAGE_MODEL = os.getenv("GEMINI_IMAGE_MODEL", "gemini-3-pro-image-preview")  # Frame overlay edits
USE_GOOGLE_SEARCH = os.getenv("USE_GOOGLE_SEARCH", "true").lower() == "true"

# Thumbnail Configuration
THUMBNAIL_URL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"
THUMBNAIL_TIMEOUT = int(os.getenv("THUMBNAIL_TIMEOUT", "10"))  # seconds

# Placeholder frame (used when no thumbnail is available)
PLACEHOLDER_WIDTH = 1280
PLACEHOLDER_HEIGHT = 720

# Output directory for exported reports and overlays
OUTPUT_DIR = os.getenv("OUTPUT_DIR", "output")


def get_api_key() -> str:
    """GEMINI_API_KEY, falling back to API_KEY."""
    return (os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or "").strip()
