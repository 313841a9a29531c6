"""Data models for the link store."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Link:
    """One code -> URL association as held in the code->URL table."""

    code: str
    url: str

    def __str__(self) -> str:
        return f"{self.code} -> {self.url}"
