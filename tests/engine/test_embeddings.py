"""Embedding cache and embedder service tests."""

from __future__ import annotations

import asyncio
from unittest.mock import patch

import pytest

from linkfinder.engine.embeddings import EmbeddingCache, SentenceTransformerEmbedder, split_into_chunks

from .conftest import FakeEmbedder

ARTICLE = (
    "Espresso needs a fine and consistent grind.\n\n"
    "Short line.\n\n\n"
    "   Cold brew coffee steeps for twelve hours.   \n"
    "It stays in the same paragraph.\n\n"
    "Tiny"
)


def test_split_into_chunks_keeps_trimmed_paragraphs_over_twenty_chars():
    chunks = split_into_chunks(ARTICLE)

    assert chunks == [
        "Espresso needs a fine and consistent grind.",
        "Cold brew coffee steeps for twelve hours.   \nIt stays in the same paragraph.",
    ]


def test_split_into_chunks_length_boundary():
    assert split_into_chunks("x" * 20) == []
    assert split_into_chunks("x" * 21) == ["x" * 21]


@pytest.mark.asyncio
async def test_identical_article_reuses_cached_embeddings():
    embedder = FakeEmbedder()
    cache = EmbeddingCache()

    chunks, embeddings = await cache.ensure_fresh(ARTICLE, embedder)
    assert len(embedder.calls) == 2
    assert len(chunks) == len(embeddings) == 2

    again_chunks, again_embeddings = await cache.ensure_fresh(ARTICLE, embedder)
    assert len(embedder.calls) == 2
    assert again_chunks == chunks
    assert again_embeddings == embeddings


@pytest.mark.asyncio
async def test_single_character_change_recomputes_everything():
    embedder = FakeEmbedder()
    cache = EmbeddingCache()

    await cache.ensure_fresh(ARTICLE, embedder)
    await cache.ensure_fresh(ARTICLE + "!", embedder)

    assert len(embedder.calls) == 4
    assert cache.article_content == ARTICLE + "!"
    assert len(cache.chunks) == len(cache.chunk_embeddings)


@pytest.mark.asyncio
async def test_failed_refresh_leaves_previous_snapshot_intact():
    cache = EmbeddingCache()
    await cache.ensure_fresh(ARTICLE, FakeEmbedder())

    with pytest.raises(RuntimeError):
        await cache.ensure_fresh("A brand new paragraph about coffee.", FakeEmbedder(fail_on="coffee"))

    assert cache.article_content == ARTICLE
    assert len(cache.chunks) == len(cache.chunk_embeddings) == 2


@pytest.mark.asyncio
async def test_clear_forgets_article():
    embedder = FakeEmbedder()
    cache = EmbeddingCache()
    await cache.ensure_fresh(ARTICLE, embedder)

    cache.clear()

    assert cache.article_content is None
    assert cache.chunks == []
    assert not cache.is_fresh(ARTICLE)
    await cache.ensure_fresh(ARTICLE, embedder)
    assert len(embedder.calls) == 4


@pytest.mark.asyncio
async def test_article_without_usable_paragraphs_caches_empty_chunks():
    embedder = FakeEmbedder()
    cache = EmbeddingCache()

    chunks, embeddings = await cache.ensure_fresh("Too short.", embedder)

    assert chunks == []
    assert embeddings == []
    assert embedder.calls == []
    assert cache.is_fresh("Too short.")


@pytest.mark.asyncio
async def test_sentence_transformer_embedder_loads_model_once():
    with patch("sentence_transformers.SentenceTransformer") as model_cls:
        model_cls.return_value.encode.return_value = [0.5, 0.25]
        embedder = SentenceTransformerEmbedder("test-model")

        await asyncio.gather(embedder.init(), embedder.init())
        vector = await embedder.embed("espresso grinder")
        await embedder.init()

    model_cls.assert_called_once_with("test-model")
    assert embedder.ready
    assert vector == [0.5, 0.25]
    model_cls.return_value.encode.assert_called_once_with(
        "espresso grinder",
        normalize_embeddings=True,
        show_progress_bar=False,
    )


@pytest.mark.asyncio
async def test_sentence_transformer_embedder_reports_load_failure():
    with patch("sentence_transformers.SentenceTransformer", side_effect=OSError("missing")):
        embedder = SentenceTransformerEmbedder("missing-model")
        with pytest.raises(RuntimeError, match="missing-model"):
            await embedder.init()

    assert not embedder.ready
