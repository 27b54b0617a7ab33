"""Text generation client interface and response helpers."""

import re
from typing import Protocol

_FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*\n?|\n?\s*```\s*$")


class TextGenerationClient(Protocol):
    """Interface for an external generative text model."""

    async def generate_text(self, prompt: str) -> str:
        """Return the model's raw text reply for a prompt."""


def strip_code_fences(text: str) -> str:
    """Remove a surrounding markdown code fence from model output."""
    return _FENCE_PATTERN.sub("", text.strip()).strip()
