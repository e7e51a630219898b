"""Flatten curriculum and help sources into searchable chunks.

Source data is parsed leniently: missing or malformed optional fields are
normalized to empty strings/lists instead of raising.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, List, Mapping

from lessonfinder.models import Chunk, ChunkKind, Corpus, HelpTopic, SubchapterContent
from lessonfinder.utils.text import coerce_text, coerce_text_list

LOGGER = logging.getLogger(__name__)

UNTITLED = "Untitled"
DEFINITION_SUFFIX = " (Definition)"
SUMMARY_SUFFIX = " (Summary)"


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


def _name(value: Any, what: str) -> str:
    name = coerce_text(value).strip()
    if not name:
        LOGGER.debug("Missing %s name, using %r", what, UNTITLED)
        return UNTITLED
    return name


def normalize_subchapter_content(raw: Any) -> SubchapterContent:
    """Normalize a subchapter ``content`` object.

    Missing text fields become ``""`` and missing list fields become ``[]``.
    """
    content = _as_mapping(raw)
    for key in ("explanation", "definitions", "summary"):
        if key not in content:
            LOGGER.debug("Subchapter content missing %r, defaulting", key)
    return SubchapterContent(
        explanation=coerce_text(content.get("explanation")),
        definitions=coerce_text_list(content.get("definitions")),
        key_points=coerce_text_list(content.get("keyPoints")),
        summary=coerce_text(content.get("summary")),
        examples=coerce_text_list(content.get("examples")),
    )


def iter_subchapter_chunks(chapter: str, subchapter: str, content: SubchapterContent) -> Iterator[Chunk]:
    """Yield explanation, each definition, then summary for one subchapter."""
    title = f"{chapter} - {subchapter}"

    def make(suffix: str, text: str) -> Chunk:
        return Chunk(
            kind=ChunkKind.CURRICULUM,
            title=title + suffix,
            text=text,
            chapter=chapter,
            subchapter=subchapter,
        )

    yield make("", content.explanation)
    for definition in content.definitions:
        yield make(DEFINITION_SUFFIX, definition)
    yield make(SUMMARY_SUFFIX, content.summary)


def flatten_curriculum(document: Any) -> List[Chunk]:
    """Flatten ``{"chapters": [{"name", "subchapters": [...]}]}`` into chunks."""
    chunks: List[Chunk] = []
    for raw_chapter in _as_list(_as_mapping(document).get("chapters")):
        chapter = _as_mapping(raw_chapter)
        chapter_name = _name(chapter.get("name"), "chapter")
        for raw_sub in _as_list(chapter.get("subchapters")):
            sub = _as_mapping(raw_sub)
            sub_name = _name(sub.get("name"), "subchapter")
            content = normalize_subchapter_content(sub.get("content"))
            chunks.extend(iter_subchapter_chunks(chapter_name, sub_name, content))
    return chunks


def normalize_help_topic(raw: Any) -> HelpTopic:
    topic = _as_mapping(raw)
    return HelpTopic(
        topic=_name(topic.get("topic"), "help topic"),
        content=coerce_text(topic.get("content")),
    )


def flatten_help_topics(topics: Iterable[Any]) -> List[Chunk]:
    """One help chunk per topic, in input order."""
    chunks = []
    for raw in topics or ():
        topic = normalize_help_topic(raw)
        chunks.append(Chunk(kind=ChunkKind.HELP, title=topic.topic, text=topic.content))
    return chunks


def build_corpus(document: Any, topics: Iterable[Any]) -> Corpus:
    """Curriculum chunks first, then help chunks."""
    curriculum = flatten_curriculum(document)
    help_chunks = flatten_help_topics(topics)
    corpus = Corpus(tuple(curriculum + help_chunks))
    LOGGER.debug(
        "Flattened %d curriculum and %d help chunks", len(curriculum), len(help_chunks)
    )
    return corpus
