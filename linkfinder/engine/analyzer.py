"""Coordinator running the lexical pass and the semantic augmentation."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence

from . import analysis as analysis_module
from . import semantic as semantic_module
from .config import EngineConfig, load_config
from .embeddings import Embedder, EmbeddingCache
from .types import AnalysisResult, LinkOpportunity

logger = logging.getLogger(__name__)

SEMANTIC_FAILURE_NOTICE = "Semantic analysis error: falling back to keyword-based matching."


class AnalysisInputError(ValueError):
    """Raised when the article or URL list is empty."""


class AnalysisInProgress(RuntimeError):
    """Raised when an analysis starts while another one is still running."""


@dataclass(frozen=True)
class AnalysisOutcome:
    """Result of a full analysis plus a non-fatal notice, if any."""

    result: AnalysisResult
    notice: Optional[str] = None

    @property
    def semantic(self) -> bool:
        return self.result.semantic


class LinkAnalyzer:
    """Runs keyword matching and semantic augmentation for one caller.

    The analyzer owns the embedding cache and receives its embedder from the
    caller. Only one analysis may run at a time; a concurrent call raises
    :class:`AnalysisInProgress` instead of racing on the cache.
    """

    def __init__(self, embedder: Embedder, config: EngineConfig | None = None) -> None:
        self.embedder = embedder
        self.config = config or load_config(None)
        self.cache = EmbeddingCache(min_chunk_length=int(self.config.get("min_chunk_length", 21)))
        self._in_flight = threading.Lock()

    @property
    def busy(self) -> bool:
        return self._in_flight.locked()

    async def analyze(
        self,
        article_text: str,
        urls: Sequence[str],
        mode: str = "batch",
        excluded_keywords: Iterable[str] = (),
        max_results: int | None = None,
    ) -> AnalysisOutcome:
        """Return lexical results augmented with semantic similarity.

        When the semantic stage fails the lexical result is returned with a
        notice instead of raising.
        """

        if not article_text.strip():
            raise AnalysisInputError("Please paste your article content first")
        if not any(url.strip() for url in urls):
            raise AnalysisInputError("Please add sitemap URLs to analyze")

        if not self._in_flight.acquire(blocking=False):
            logger.warning("Rejected analysis request while another analysis is running")
            raise AnalysisInProgress("An analysis is already running")

        try:
            excluded = [keyword.lower() for keyword in excluded_keywords]
            lexical = analysis_module.analyze_internal_links(
                article_text,
                urls,
                mode,
                max_results=max_results,
                excluded_keywords=excluded,
                config=self.config,
            )
            try:
                opportunities = await self._augment(article_text, lexical)
            except Exception:
                logger.exception("Semantic analysis failed; returning keyword-based results")
                return AnalysisOutcome(result=lexical, notice=SEMANTIC_FAILURE_NOTICE)
            return AnalysisOutcome(result=replace(lexical, opportunities=opportunities, semantic=True))
        finally:
            self._in_flight.release()

    async def _augment(self, article_text: str, lexical: AnalysisResult) -> List[LinkOpportunity]:
        await self.embedder.init()
        chunks, chunk_embeddings = await self.cache.ensure_fresh(article_text, self.embedder)
        return await semantic_module.augment_opportunities(
            lexical.opportunities,
            chunks,
            chunk_embeddings,
            self.embedder,
            self.config,
        )

    def reset(self) -> None:
        """Forget the cached article chunks and embeddings."""

        self.cache.clear()
