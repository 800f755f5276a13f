"""
JSON output sink.

Writes the whole record collection as one compact UTF-8 JSON array,
replacing any previous file. The document is written to a temporary
file next to the target first, so a failed write never leaves a
partial output behind.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import List, Union
import logging

from .base import EnrichedMountainRecord
from .exceptions import PersistenceError

logger = logging.getLogger(__name__)


def serialize_records(records: List[EnrichedMountainRecord]) -> str:
    """Serialize records to compact JSON, keeping record and key order."""
    return json.dumps(
        [record.to_dict() for record in records],
        ensure_ascii=False,
        separators=(',', ':')
    )


class JsonFileSink:
    """Persists enriched records to a single JSON file."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, records: List[EnrichedMountainRecord]) -> Path:
        """
        Write all records, overwriting the target file.

        Returns:
            Path of the written file

        Raises:
            PersistenceError: If the file cannot be written
        """
        document = serialize_records(records)
        directory = self.path.parent

        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                'w',
                encoding='utf-8',
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix='.tmp',
                delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(document)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise PersistenceError(f"Could not write {self.path}: {e}") from e

        logger.info(f"Saved {len(records)} records to {self.path}")
        return self.path
