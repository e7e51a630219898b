"""Core LessonFinder data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Sequence


class ChunkKind(str, Enum):
    """Origin of a searchable chunk."""

    CURRICULUM = "curriculum"
    HELP = "help"


@dataclass(frozen=True, slots=True)
class Chunk:
    """One retrievable unit of offline text.

    ``chapter`` and ``subchapter`` are only set for curriculum chunks.
    """

    kind: ChunkKind
    title: str
    text: str = ""
    chapter: str | None = None
    subchapter: str | None = None

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("Chunk title must not be empty")
        if self.text is None:
            raise ValueError("Chunk text must be a string")

    def to_dict(self) -> dict:
        return {
            "kind": self.kind.value,
            "title": self.title,
            "text": self.text,
            "chapter": self.chapter,
            "subchapter": self.subchapter,
        }


@dataclass(frozen=True)
class Corpus(Sequence[Chunk]):
    """Read-only ordered collection of chunks; position is identity."""

    chunks: tuple[Chunk, ...] = ()

    def __getitem__(self, index):
        return self.chunks[index]

    def __len__(self) -> int:
        return len(self.chunks)

    def __iter__(self) -> Iterator[Chunk]:
        return iter(self.chunks)

    def count_kind(self, kind: ChunkKind) -> int:
        return sum(1 for chunk in self.chunks if chunk.kind == kind)

    def stats(self) -> dict[str, int]:
        return {
            "chunk_count": len(self.chunks),
            "curriculum_count": self.count_kind(ChunkKind.CURRICULUM),
            "help_count": self.count_kind(ChunkKind.HELP),
        }


@dataclass(slots=True)
class SubchapterContent:
    """Normalized body of a curriculum subchapter."""

    explanation: str = ""
    definitions: List[str] = field(default_factory=list)
    key_points: List[str] = field(default_factory=list)
    summary: str = ""
    examples: List[str] = field(default_factory=list)


@dataclass(slots=True)
class HelpTopic:
    """One entry of the app-help list."""

    topic: str
    content: str = ""
