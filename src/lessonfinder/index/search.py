"""Offline search interface."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from lessonfinder.config import DEFAULT_MAX_RESULTS, AppConfig
from lessonfinder.content.flatten import build_corpus
from lessonfinder.content.loader import load_curriculum, load_help_topics
from lessonfinder.index.indexer import EditDistanceBackend, IndexOptions, SearchBackend
from lessonfinder.models import Chunk, Corpus

LOGGER = logging.getLogger(__name__)


class Searcher:
    """High-level API to query the offline index."""

    def __init__(
        self,
        backend: SearchBackend,
        index: object,
        corpus: Corpus,
        *,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> None:
        if max_results < 0:
            raise ValueError("max_results must not be negative")
        self.backend = backend
        self.index = index
        self.corpus = corpus
        self.max_results = max_results

    @classmethod
    def from_corpus(
        cls,
        corpus: Corpus,
        options: IndexOptions | None = None,
        *,
        backend: SearchBackend | None = None,
        max_results: int = DEFAULT_MAX_RESULTS,
    ) -> "Searcher":
        backend = backend or EditDistanceBackend()
        index = backend.build(corpus, options or IndexOptions())
        return cls(backend, index, corpus, max_results=max_results)

    def search(self, query: str) -> List[Chunk]:
        """Return up to ``max_results`` chunks, best match first.

        An empty list means nothing matched offline; it is not an error.
        """
        if not query or not query.strip():
            return []
        matches = self.backend.search(self.index, query)
        results = [self.corpus[match.position] for match in matches[: self.max_results]]
        LOGGER.debug("Offline search %r -> %d of %d matches", query, len(results), len(matches))
        return results


def build_searcher(config: AppConfig | None = None, base_dir: Path | None = None) -> Searcher:
    """Load the content sources and build the searcher once at startup.

    Load failures raise :class:`~lessonfinder.content.loader.ContentLoadError`.
    """
    config = config or AppConfig()
    curriculum_path, help_path = config.resolve_paths(base_dir)
    corpus = build_corpus(load_curriculum(curriculum_path), load_help_topics(help_path))
    return Searcher.from_corpus(
        corpus, config.index_options(), max_results=config.max_results
    )
