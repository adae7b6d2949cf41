"""Service functions for preparing analysis inputs and the shared analyzer.

These helpers sit between the views and the ranking engine: they turn
uploaded sitemap files and pasted text into clean URL lists, convert HTML
articles to plain paragraphs, and build the process-wide
:class:`~linkfinder.engine.analyzer.LinkAnalyzer`.
"""

from __future__ import annotations

import gzip
import re
from typing import IO, List

from bs4 import BeautifulSoup  # type: ignore
from bs4.element import PreformattedString  # type: ignore
from django.conf import settings

from .engine.analyzer import LinkAnalyzer
from .engine.config import load_config
from .engine.embeddings import SentenceTransformerEmbedder

# Block-level tags whose text becomes its own paragraph
BLOCK_TAGS: List[str] = [
    'p', 'li', 'blockquote', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'pre',
    'div', 'section', 'article', 'aside', 'header', 'footer', 'main', 'nav',
    'figure', 'figcaption', 'table', 'tr', 'td', 'th', 'caption', 'dl', 'dt', 'dd',
]

_URL_SEPARATOR_RE = re.compile(r"[\s,]+")

_ANALYZER: LinkAnalyzer | None = None


def normalize_urls(raw_input: str) -> List[str]:
    """Split pasted URLs into a cleaned, de-duplicated list.

    Entries may be separated by newlines, commas or whitespace. Query
    strings and fragments are removed, as is the trailing slash (except
    for the root path ``/``). Empty entries are dropped and the
    first occurrence of each URL wins.

    Parameters
    ----------
    raw_input:
        Text pasted by the user or produced by :func:`extract_sitemap_urls`.

    Returns
    -------
    list of str
        URLs in first-seen order.
    """
    seen: set[str] = set()
    urls: List[str] = []
    for entry in _URL_SEPARATOR_RE.split(raw_input or ''):
        cleaned = entry.split('?')[0].split('#')[0]
        if cleaned.endswith('/'):
            # A run of trailing slashes counts as one; the root path stays "/"
            cleaned = cleaned.rstrip('/') or '/'
        if not cleaned or cleaned in seen:
            continue
        seen.add(cleaned)
        urls.append(cleaned)
    return urls


def extract_sitemap_urls(content: str) -> str:
    """Turn sitemap content into a newline-delimited URL string.

    XML sitemaps contribute the text of every ``<loc>`` element; anything
    else is treated as a plain list and returned unchanged.
    """
    if '<loc' not in content.lower():
        return content

    try:
        soup = BeautifulSoup(content, 'lxml')
    except Exception:
        # Fallback to html.parser if lxml isn't installed
        soup = BeautifulSoup(content, 'html.parser')

    locations = [loc.get_text(strip=True) for loc in soup.find_all('loc')]
    return '\n'.join(location for location in locations if location)


def read_uploaded_sitemap(file_obj: IO[bytes]) -> str:
    """Decode an uploaded sitemap or URL list, unpacking ``.gz`` files."""

    data = file_obj.read()
    if getattr(file_obj, 'name', '').lower().endswith('.gz'):
        try:
            data = gzip.decompress(data)
        except OSError:
            # Named .gz but stored uncompressed
            pass
    try:
        text = data.decode('utf-8')
    except UnicodeDecodeError:
        text = data.decode('latin-1', errors='ignore')
    return extract_sitemap_urls(text)


def html_to_text(html: str) -> str:
    """Convert article HTML to text with one blank line between blocks."""

    if not html:
        return html

    try:
        soup = BeautifulSoup(html, 'lxml')
    except Exception:
        soup = BeautifulSoup(html, 'html.parser')

    for node in soup(['script', 'style', 'noscript', 'template']):
        node.decompose()

    # Consecutive text nodes sharing their nearest block ancestor form one
    # paragraph; text outside any block is grouped the same way.
    blocks: List[str] = []
    pieces: List[str] = []
    current_block = None
    for node in soup.find_all(string=True):
        if isinstance(node, PreformattedString) or not node.strip():
            continue
        block = node.find_parent(BLOCK_TAGS)
        if pieces and block is not current_block:
            blocks.append(' '.join(' '.join(pieces).split()))
            pieces = []
        current_block = block
        pieces.append(node)
    if pieces:
        blocks.append(' '.join(' '.join(pieces).split()))
    return '\n\n'.join(blocks)


def get_analyzer() -> LinkAnalyzer:
    """Return the process-wide analyzer, building it on first use."""

    global _ANALYZER
    if _ANALYZER is None:
        config = load_config(getattr(settings, 'LINKFINDER_ENGINE_CONFIG', None))
        model_name = getattr(settings, 'LINKFINDER_EMBEDDING_MODEL', None) or config.get('embedding_model')
        _ANALYZER = LinkAnalyzer(SentenceTransformerEmbedder(model_name), config)
    return _ANALYZER
