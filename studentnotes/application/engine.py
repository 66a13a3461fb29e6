"""State engine that wires configuration, logging and the entry store together."""

import logging
from collections import Counter
from typing import List, Optional, Dict, Any

from studentnotes.domain.models import Entry
from studentnotes.domain.errors import InvalidArgumentError
from studentnotes.application.config import Config
from studentnotes.ingestion import TextPreprocessor
from studentnotes.storage import Stater, SQLiteStore, MemoryStore

logger = logging.getLogger(__name__)


class StateEngine:
    """Main engine for reading and mutating note entries."""

    def __init__(self, config: Optional[Config] = None):
        self.config = config or Config()
        self._setup_logging()

        self.store: Optional[Stater] = None
        self.preprocessor = TextPreprocessor()

        self._initialized = False

    def _setup_logging(self):
        """Setup logging configuration."""
        logging.basicConfig(
            level=getattr(logging, self.config.log_level.upper(), logging.INFO),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            filename=self.config.log_file
        )

    def initialize(self) -> None:
        """Open the configured store."""
        if self._initialized:
            return

        self.store = self._create_store()
        self._initialized = True
        logger.info(f"State engine ready ({self.store.kind} at {self.store.location})")

    def _create_store(self) -> Stater:
        """Create the entry store based on configuration."""
        kind = self.config.storage.kind.lower()
        if kind in ("production", "sqlite"):
            return SQLiteStore(self.config.storage.db_path)
        elif kind in ("memory", "development"):
            return MemoryStore(self.config.storage.memory_namespace)
        else:
            raise InvalidArgumentError(f"Unknown storage kind: {self.config.storage.kind}")

    def _ready(self) -> Stater:
        if not self._initialized:
            self.initialize()
        return self.store

    def current(self) -> List[Entry]:
        return self._ready().current()

    def create(self, text: Optional[str], color: int = 0) -> Entry:
        return self._ready().entry_create(text, color)

    def update(self, entry_id: int, text: Optional[str], color: int = 0) -> Entry:
        return self._ready().entry_update(entry_id, text, color)

    def delete(self, entry_id: int) -> Entry:
        return self._ready().entry_delete(entry_id)

    def get(self, entry_id: int) -> Entry:
        return self._ready().get(entry_id)

    def search(self, query: Optional[str]) -> List[Entry]:
        """Search entries, capped by the configured limit."""
        results = self._ready().entry_search(query)
        limit = self.config.search.limit
        if limit is not None:
            results = results[:limit]
        return results

    def get_statistics(self) -> Dict[str, Any]:
        """Get statistics about the stored entries."""
        store = self._ready()
        entries = store.current()

        colors = Counter(entry.color for entry in entries)
        tags = Counter(
            tag.id for entry in entries for tag in self.preprocessor.extract_tags(entry.text)
        )

        return {
            'total_entries': len(entries),
            'colors': dict(sorted(colors.items())),
            'tags': dict(tags.most_common()),
            'kind': store.kind,
            'location': store.location,
            'latest': entries[0].created if entries else None
        }

    def close(self) -> None:
        if self.store is not None:
            self.store.close()
        self.store = None
        self._initialized = False
