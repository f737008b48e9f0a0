"""Console input interface."""

from typing import Protocol


class LineReader(Protocol):
    """Interface for reading one line of operator input."""

    def __call__(self, prompt: str) -> str:
        """Show `prompt` and return the entered line (may be empty)."""
        ...
