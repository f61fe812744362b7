"""Data models for the memory system."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class InteractionMessage:
    """One side of a stored interaction.

    Attributes:
        role: 'user' or 'assistant'.
        content: The message text.
        name: Optional display name of the speaker.
    """

    role: str
    content: str
    name: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name:
            data["name"] = self.name
        return data
