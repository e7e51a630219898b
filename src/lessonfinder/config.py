"""Application configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lessonfinder.index.indexer import DEFAULT_THRESHOLD, IndexOptions

DEFAULT_MAX_RESULTS = 3


@dataclass(slots=True)
class AppConfig:
    """Offline search settings.

    ``curriculum_path`` and ``help_path`` default to the data bundled with
    the package when left as ``None``.
    """

    curriculum_path: Path | None = None
    help_path: Path | None = None
    threshold: float = DEFAULT_THRESHOLD
    max_results: int = DEFAULT_MAX_RESULTS
    min_token_length: int = 3

    def resolve_paths(self, base_dir: Path | None = None) -> tuple[Path | None, Path | None]:
        return _resolve(self.curriculum_path, base_dir), _resolve(self.help_path, base_dir)

    def index_options(self) -> IndexOptions:
        return IndexOptions(threshold=self.threshold, min_token_length=self.min_token_length)


def _resolve(path: Path | None, base_dir: Path | None) -> Path | None:
    if path is None:
        return None
    if Path(path).is_absolute() or base_dir is None:
        return Path(path)
    return base_dir / path
