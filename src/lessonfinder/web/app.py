"""FastAPI application exposing offline search to the chat client."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from lessonfinder.chat.fallback import build_fallback_reply, classify_failure
from lessonfinder.config import AppConfig
from lessonfinder.index.search import Searcher, build_searcher

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="LessonFinder Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SearchPayload(BaseModel):
    query: str


class ChunkOut(BaseModel):
    kind: str
    title: str
    text: str
    chapter: str | None = None
    subchapter: str | None = None


class FallbackPayload(BaseModel):
    query: str
    offline: bool = True
    status_code: int | None = None
    error: str | None = None


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")
    config = getattr(app.state, "config", None) or AppConfig()
    # Load errors propagate so a broken content bundle stops the server.
    app.state.searcher = build_searcher(config)


def get_searcher(request: Request) -> Searcher:
    searcher = getattr(request.app.state, "searcher", None)
    if searcher is None:
        LOGGER.info("Searcher not initialised by startup, building it now")
        config = getattr(request.app.state, "config", None) or AppConfig()
        searcher = build_searcher(config)
        request.app.state.searcher = searcher
    return searcher


@app.post("/search")
async def search_offline(
    payload: SearchPayload, searcher: Searcher = Depends(get_searcher)
) -> dict[str, List[ChunkOut]]:
    results = searcher.search(payload.query.strip())
    return {"results": [ChunkOut(**chunk.to_dict()) for chunk in results]}


@app.post("/chat/fallback")
async def chat_fallback(
    payload: FallbackPayload, searcher: Searcher = Depends(get_searcher)
) -> dict[str, Any]:
    failure = None
    if not payload.offline:
        failure = classify_failure(payload.status_code, payload.error or "")
    fallback = build_fallback_reply(
        searcher, payload.query.strip(), offline=payload.offline, failure=failure
    )
    return fallback.to_dict()


@app.get("/corpus")
async def corpus_stats(searcher: Searcher = Depends(get_searcher)) -> dict[str, Any]:
    return {"stats": searcher.corpus.stats()}
