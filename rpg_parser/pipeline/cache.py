"""
DocumentCache
=============

Keeps the most recent :class:`~rpg_parser.models.RpgDocument` per source
identity (a URI, a path, any hashable key) together with the version it was
built from.  A lookup with a different version rescans and replaces the
entry; there is one entry per identity.

The cache is a plain dict and is not safe to share between threads.
"""
from __future__ import annotations

import logging
from typing import Dict, Hashable, Optional, Tuple

from ..models import RpgDocument
from .scanner import RpgScanner

logger = logging.getLogger(__name__)


class DocumentCache:
    """
    Parameters
    ----------
    scanner:
        Scanner used on a miss.  Defaults to a fresh :class:`RpgScanner`.
    """

    def __init__(self, scanner: Optional[RpgScanner] = None) -> None:
        self._scanner = scanner or RpgScanner()
        # identity → (version, document)
        self._entries: Dict[Hashable, Tuple[Hashable, RpgDocument]] = {}
        self.hits = 0
        self.misses = 0

    def get(self, identity: Hashable, version: Hashable, text: str) -> RpgDocument:
        """Return the document for (*identity*, *version*), scanning *text* on a miss."""
        entry = self._entries.get(identity)
        if entry is not None and entry[0] == version:
            self.hits += 1
            logger.debug("Cache hit: %s (version %s)", identity, version)
            return entry[1]

        self.misses += 1
        logger.debug("Cache miss: %s (version %s)", identity, version)
        document = self._scanner.scan_text(text)
        self._entries[identity] = (version, document)
        return document

    def peek(self, identity: Hashable) -> Optional[RpgDocument]:
        """Cached document for *identity* regardless of version (or None)."""
        entry = self._entries.get(identity)
        return entry[1] if entry is not None else None

    def invalidate(self, identity: Hashable) -> None:
        self._entries.pop(identity, None)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, identity: object) -> bool:
        return identity in self._entries

    def __len__(self) -> int:
        return len(self._entries)
