"""
Adapters – concrete implementations of ports.
Gemini for analysis and image edits, YouTube for thumbnails, the
environment for the API key. Inject other implementations via overrides.
"""

from content_revival.adapters.gemini import GeminiAnalysisAdapter, GeminiImageEditAdapter
from content_revival.adapters.keys import EnvKeyCapability, UnavailableKeyCapability
from content_revival.adapters.youtube import YouTubeThumbnailAdapter


def default_adapters(**overrides):
    """
    Build default adapter instances (use package config).
    Overrides: analysis_provider=..., image_editor=..., etc. for testing or other providers.
    """
    defaults = {
        "analysis_provider": GeminiAnalysisAdapter(),
        "image_editor": GeminiImageEditAdapter(),
        "thumbnail_source": YouTubeThumbnailAdapter(),
        "key_capability": EnvKeyCapability(),
    }
    defaults.update(overrides)
    return defaults


__all__ = [
    "EnvKeyCapability",
    "GeminiAnalysisAdapter",
    "GeminiImageEditAdapter",
    "UnavailableKeyCapability",
    "YouTubeThumbnailAdapter",
    "default_adapters",
]
