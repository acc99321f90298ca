"""IKeyCapability variants: a key the user can select, or none to manage."""

import getpass
import os
from typing import Callable, Optional

from content_revival import config
from content_revival.ports.interfaces import IKeyCapability


class EnvKeyCapability(IKeyCapability):
    """Available: key lives in the environment; selecting one prompts for it."""

    available = True

    def __init__(
        self,
        env_var: str = "GEMINI_API_KEY",
        prompt: Optional[Callable[[str], str]] = None,
    ):
        self._env_var = env_var
        self._prompt = prompt or getpass.getpass

    def has_key(self) -> bool:
        return bool((os.getenv(self._env_var) or "").strip() or config.get_api_key())

    def select_key(self) -> bool:
        try:
            key = (self._prompt("Paste a Gemini API key (paid project): ") or "").strip()
        except EOFError:
            key = ""
        if not key:
            print("  ⚠️  No API key entered")
            return False
        os.environ[self._env_var] = key
        print("  ✅ API key selected for this session")
        return True


class UnavailableKeyCapability(IKeyCapability):
    """Unavailable: nothing to select, the configured key is assumed present."""

    available = False

    def has_key(self) -> bool:
        return True

    def select_key(self) -> bool:
        return False
