"""In-memory and JSON snapshot document stores"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, List
from chronos_analytics.domain.exceptions import DataStoreError

logger = logging.getLogger(__name__)


class InMemoryStore:
    """Document store backed by a dict of collection name -> records"""

    def __init__(self, collections: Dict[str, List[Dict[str, Any]]] | None = None):
        self.collections = collections or {}
        self.fetch_count = 0

    async def fetch_all(self, collection: str) -> List[Dict[str, Any]]:
        """Return a copy of the collection so callers never share records"""
        self.fetch_count += 1
        return copy.deepcopy(self.collections.get(collection, []))


class SnapshotStore(InMemoryStore):
    """
    Store loaded from a directory of `<collection>.json` exports.

    Each file holds either a list of records or a {document_id: fields} map.
    """

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)
        super().__init__(self._load())

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.directory.is_dir():
            raise DataStoreError(f"Snapshot directory not found: {self.directory}")

        collections = {}
        for file in sorted(self.directory.glob("*.json")):
            try:
                data = json.loads(file.read_text(encoding="utf-8"))
            except ValueError as e:
                raise DataStoreError(f"Invalid snapshot file {file.name}: {e}") from e

            if isinstance(data, dict):
                records = [
                    {"id": doc_id, **fields}
                    for doc_id, fields in data.items()
                    if isinstance(fields, dict)
                ]
            elif isinstance(data, list):
                records = [record for record in data if isinstance(record, dict)]
            else:
                raise DataStoreError(f"Invalid snapshot file {file.name}: expected a list or an object")

            skipped = len(data) - len(records)
            if skipped:
                logger.warning(
                    f"Skipped {skipped} malformed records in {file.name}",
                    extra={"collection": file.stem, "skipped": skipped},
                )
            collections[file.stem] = records
        return collections
