"""Keyword search over a sectioned documentation corpus."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import threading
from pathlib import Path
from typing import Protocol

from docs_assistant.config import SearchConfig
from docs_assistant.docs.scoring import score_section
from docs_assistant.docs.sections import split_into_sections
from docs_assistant.errors import CorpusUnavailable
from docs_assistant.types import DocumentSection, SearchResult

logger = logging.getLogger(__name__)


class CorpusSource(Protocol):
    """Read-only provider of raw corpus text."""

    identifier: str

    async def read(self) -> str:
        """Return the full document text or raise `CorpusUnavailable`."""


class FileCorpusSource:
    """Corpus backed by a UTF-8 file on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.identifier = str(self.path)

    async def read(self) -> str:
        try:
            return await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise CorpusUnavailable(
                f"Documentation corpus unavailable: {self.identifier}"
            ) from exc


class InMemoryCorpusSource:
    """Corpus held in memory; mostly useful for tests."""

    def __init__(self, text: str, *, identifier: str = "memory") -> None:
        self.text = text
        self.identifier = identifier

    async def read(self) -> str:
        return self.text


class SectionCache:
    """Parsed sections keyed by content hash; a changed corpus misses."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._digest: str | None = None
        self._sections: tuple[DocumentSection, ...] = ()

    def sections_for(self, text: str) -> tuple[DocumentSection, ...]:
        digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
        with self._lock:
            if digest == self._digest:
                return self._sections
        sections = tuple(split_into_sections(text))
        with self._lock:
            self._digest = digest
            self._sections = sections
        return sections

    def clear(self) -> None:
        with self._lock:
            self._digest = None
            self._sections = ()


class DocumentationSearch:
    """Ranks corpus sections against a free-text query.

    Scoring is pure once the corpus text is loaded: results are filtered to
    positive relevance, sorted descending (stable on ties, so earlier sections
    win) and capped at `limit`.
    """

    def __init__(
        self,
        source: CorpusSource,
        config: SearchConfig | None = None,
        *,
        cache: SectionCache | None = None,
    ) -> None:
        self.source = source
        self.config = config or SearchConfig()
        self._cache = cache or SectionCache()

    async def search(self, query: str, limit: int | None = None) -> list[SearchResult]:
        """Return up to `limit` ranked sections; `limit=0` yields `[]`.

        A blank query returns `[]` without reading the corpus, so an
        unreadable source is not reported for it.
        """
        final_limit = self.config.default_limit if limit is None else limit
        if final_limit < 0:
            raise ValueError(f"limit must be >= 0, got {final_limit}")
        if final_limit == 0 or not query.strip():
            return []

        text = await self.source.read()
        sections = self._cache.sections_for(text)
        logger.debug(
            "Searching %d sections from %s for %r",
            len(sections),
            self.source.identifier,
            query,
        )

        scored = [
            SearchResult(
                section=section.title,
                content=section.body,
                relevance=score_section(query, section.title, section.body, self.config),
            )
            for section in sections
        ]
        ranked = sorted(
            (result for result in scored if result.relevance > 0),
            key=lambda result: result.relevance,
            reverse=True,
        )
        return ranked[:final_limit]
