"""Fuzzy index over the flattened corpus."""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import List, Protocol, Sequence

import numpy as np

from lessonfinder.index.matching import token_score, tokenize
from lessonfinder.models import Chunk, Corpus

LOGGER = logging.getLogger(__name__)

# Fraction of edit errors allowed per query token; stricter than the common 0.6.
DEFAULT_THRESHOLD = 0.3
DEFAULT_KEYS = ("title", "text")

_STRING_FIELDS = {f.name for f in fields(Chunk) if f.name != "kind"}


@dataclass(frozen=True, slots=True)
class IndexOptions:
    threshold: float = DEFAULT_THRESHOLD
    keys: tuple[str, ...] = DEFAULT_KEYS
    min_token_length: int = 3

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be within [0, 1], got {self.threshold}")
        if not self.keys:
            raise ValueError("At least one searchable key is required")
        unknown = [key for key in self.keys if key not in _STRING_FIELDS]
        if unknown:
            raise ValueError(f"Unknown searchable keys: {', '.join(unknown)}")
        if self.min_token_length < 1:
            raise ValueError("min_token_length must be at least 1")


@dataclass(frozen=True, slots=True)
class RankedMatch:
    """Position of a matching chunk in the corpus and its match distance."""

    position: int
    score: float


class FuzzyIndex:
    """Typo-tolerant index over a fixed corpus.

    Each query token is matched against every key field of every chunk; a
    chunk matches when at least one token is within ``threshold``. The chunk
    score is the mean token score, so chunks matching more of the query rank
    first. Ties keep corpus order. A query made only of words shorter than
    ``min_token_length`` is matched as one pattern.
    """

    def __init__(
        self, corpus: Corpus, options: IndexOptions, prepared: tuple[tuple[str, ...], ...]
    ) -> None:
        self.corpus = corpus
        self.options = options
        self._fields = prepared

    @classmethod
    def build(cls, chunks: Sequence[Chunk], options: IndexOptions | None = None) -> "FuzzyIndex":
        options = options or IndexOptions()
        corpus = chunks if isinstance(chunks, Corpus) else Corpus(tuple(chunks))
        prepared = tuple(
            tuple((getattr(chunk, key) or "").lower() for key in options.keys) for chunk in corpus
        )
        LOGGER.info(
            "Built offline index: %d chunks, keys=%s, threshold=%.2f",
            len(corpus),
            ",".join(options.keys),
            options.threshold,
        )
        return cls(corpus, options, prepared)

    def __len__(self) -> int:
        return len(self.corpus)

    def match(self, query: str) -> List[RankedMatch]:
        tokens = tokenize(query, min_length=self.options.min_token_length)
        if not tokens:
            # Only short words: score the whole query as a single pattern.
            pattern = query.strip().lower()
            tokens = [pattern] if pattern else []
        if not tokens or not self._fields:
            return []

        threshold = self.options.threshold
        scores = np.ones((len(self._fields), len(tokens)), dtype=float)
        for row, values in enumerate(self._fields):
            for col, token in enumerate(tokens):
                scores[row, col] = min(token_score(token, value) for value in values)

        hits = (scores <= threshold).any(axis=1)
        positions = np.flatnonzero(hits)
        if positions.size == 0:
            return []

        token_scores = np.where(scores[positions] <= threshold, scores[positions], 1.0)
        chunk_scores = token_scores.mean(axis=1)
        order = np.argsort(chunk_scores, kind="stable")
        return [
            RankedMatch(position=int(positions[i]), score=float(chunk_scores[i])) for i in order
        ]


class SearchBackend(Protocol):
    """Seam for swapping the approximate matcher."""

    def build(self, chunks: Sequence[Chunk], options: IndexOptions) -> object: ...

    def search(self, index: object, query: str) -> List[RankedMatch]: ...


class EditDistanceBackend:
    """Default backend built on :class:`FuzzyIndex`."""

    def build(self, chunks: Sequence[Chunk], options: IndexOptions) -> FuzzyIndex:
        return FuzzyIndex.build(chunks, options)

    def search(self, index: FuzzyIndex, query: str) -> List[RankedMatch]:
        return index.match(query)
