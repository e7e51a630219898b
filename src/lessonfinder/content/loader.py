"""Loading of the static curriculum and help-topic sources.

Both sources ship as JSON inside the package. Either one can be replaced
by a file on disk, e.g. a newer export of the lesson content.
"""

from __future__ import annotations

import json
import logging
from importlib.resources import files
from pathlib import Path
from typing import Any, Dict, List

LOGGER = logging.getLogger(__name__)

CURRICULUM_RESOURCE = "curriculum.json"
HELP_RESOURCE = "help_topics.json"


class ContentLoadError(ValueError):
    """Raised when a content source cannot be read or parsed."""


def _read_bundled(name: str) -> str:
    resource = files("lessonfinder.data").joinpath(name)
    return resource.read_text(encoding="utf-8")


def _load_json(path: Path | None, bundled: str) -> Any:
    source = str(path) if path is not None else f"bundled:{bundled}"
    try:
        raw = path.read_text(encoding="utf-8") if path is not None else _read_bundled(bundled)
    except OSError as exc:
        raise ContentLoadError(f"Unable to read content source {source}: {exc}") from exc
    LOGGER.debug("Loaded content source %s", source)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ContentLoadError(f"Invalid JSON in content source {source}: {exc}") from exc


def load_curriculum(path: Path | None = None) -> Dict[str, Any]:
    """Load the curriculum document (``{"chapters": [...]}``)."""
    document = _load_json(path, CURRICULUM_RESOURCE)
    if not isinstance(document, dict):
        raise ContentLoadError("Curriculum source must be a JSON object")
    if not isinstance(document.get("chapters"), list):
        raise ContentLoadError("Curriculum source has no 'chapters' list")
    return document


def load_help_topics(path: Path | None = None) -> List[Any]:
    """Load the help-topic list from a ``{"helpTopics": [...]}`` document.

    A bare JSON list is accepted as well.
    """
    document = _load_json(path, HELP_RESOURCE)
    if isinstance(document, list):
        return document
    if not isinstance(document, dict):
        raise ContentLoadError("Help source must be a JSON object or list")
    topics = document.get("helpTopics")
    if not isinstance(topics, list):
        raise ContentLoadError("Help source has no 'helpTopics' list")
    return topics
