"""Embedding service and the per-article chunk embedding cache."""

from __future__ import annotations

import asyncio
import logging
import re
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Tuple

from .types import Vector

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK_RE = re.compile(r"\n{2,}")


class Embedder(Protocol):
    """Text to vector service used by the semantic stage."""

    async def init(self) -> None:
        ...

    async def embed(self, text: str) -> Vector:
        ...


class SentenceTransformerEmbedder:
    """Embedder backed by a lazily loaded ``sentence-transformers`` model.

    ``init`` is idempotent: the first call loads the model in a worker
    thread, later calls return immediately. Loading is guarded by a lock so
    concurrent callers never load the model twice.
    """

    def __init__(self, model_name: str, *, normalize: bool = True) -> None:
        self.model_name = model_name
        self.normalize = normalize
        self._model: Any = None
        self._lock = threading.Lock()

    @property
    def ready(self) -> bool:
        return self._model is not None

    async def init(self) -> None:
        if self._model is not None:
            return
        await asyncio.to_thread(self._load)

    def _load(self) -> None:
        with self._lock:
            if self._model is not None:
                return
            from sentence_transformers import SentenceTransformer

            logger.info("Loading embedding model %s", self.model_name)
            try:
                self._model = SentenceTransformer(self.model_name)
            except Exception as exc:
                raise RuntimeError(
                    f"Failed to load embedding model '{self.model_name}': {exc}"
                ) from exc

    async def embed(self, text: str) -> Vector:
        await self.init()
        return await asyncio.to_thread(self._encode, text)

    def _encode(self, text: str) -> Vector:
        vector = self._model.encode(
            text,
            normalize_embeddings=self.normalize,
            show_progress_bar=False,
        )
        return [float(value) for value in vector]


def split_into_chunks(text: str, min_length: int = 21) -> List[str]:
    """Split article text into trimmed paragraphs of at least ``min_length`` chars."""

    chunks = []
    for paragraph in _PARAGRAPH_BREAK_RE.split(text):
        cleaned = paragraph.strip()
        if len(cleaned) >= min_length:
            chunks.append(cleaned)
    return chunks


@dataclass(frozen=True)
class CacheSnapshot:
    """Chunks and their embeddings for one exact article text."""

    article_content: str
    chunks: List[str] = field(default_factory=list)
    chunk_embeddings: List[Vector] = field(default_factory=list)


class EmbeddingCache:
    """Memoizes paragraph chunks and their embeddings for the last article.

    The cache is keyed by the exact article string. Any difference triggers
    a full recomputation, and the new snapshot replaces the old one in a
    single assignment once every chunk has been embedded.
    """

    def __init__(self, min_chunk_length: int = 21) -> None:
        self.min_chunk_length = min_chunk_length
        self._snapshot: Optional[CacheSnapshot] = None

    @property
    def article_content(self) -> Optional[str]:
        return self._snapshot.article_content if self._snapshot else None

    @property
    def chunks(self) -> List[str]:
        return list(self._snapshot.chunks) if self._snapshot else []

    @property
    def chunk_embeddings(self) -> List[Vector]:
        return list(self._snapshot.chunk_embeddings) if self._snapshot else []

    def is_fresh(self, article_text: str) -> bool:
        return self._snapshot is not None and self._snapshot.article_content == article_text

    async def ensure_fresh(self, article_text: str, embedder: Embedder) -> Tuple[List[str], List[Vector]]:
        """Return chunks and embeddings for ``article_text``, recomputing on change."""

        snapshot = self._snapshot
        if snapshot is not None and snapshot.article_content == article_text:
            logger.debug("Embedding cache hit (%d chunks)", len(snapshot.chunks))
            return list(snapshot.chunks), list(snapshot.chunk_embeddings)

        chunks = split_into_chunks(article_text, self.min_chunk_length)
        embeddings = await asyncio.gather(*(embedder.embed(chunk) for chunk in chunks))
        snapshot = CacheSnapshot(
            article_content=article_text,
            chunks=chunks,
            chunk_embeddings=list(embeddings),
        )
        self._snapshot = snapshot
        logger.debug("Embedding cache refreshed with %d chunks", len(chunks))
        return list(snapshot.chunks), list(snapshot.chunk_embeddings)

    def clear(self) -> None:
        self._snapshot = None
