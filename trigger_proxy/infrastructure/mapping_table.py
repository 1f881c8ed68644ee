"""Static repository/branch to job mapping loaded from a ';'-separated file."""

import csv
from collections.abc import Iterable, Sequence

from trigger_proxy.domain.constants import (
    FILE_RECORD_FIELDS,
    JOB_FIELD_INDEX,
    KEY_SEPARATOR,
    MAPPING_DELIMITER,
    PLAIN_RECORD_FIELDS,
)
from trigger_proxy.domain.errors import MalformedRecordError, MappingLoadError
from trigger_proxy.logging_config import get_logger

logger = get_logger(__name__)


def build_key(parts: Sequence[str]) -> str:
    """Join key parts into a lookup key, e.g. ["repo", "main"] -> "repo|main"."""
    return KEY_SEPARATOR.join(parts)


class MappingTable:
    """Immutable lookup from repo/branch(/file) keys to ordered job lists."""

    def __init__(self, mapping: dict[str, list[str]], record_count: int) -> None:
        self._mapping = mapping
        self._record_count = record_count

    def __len__(self) -> int:
        return self._record_count

    @property
    def keys(self) -> list[str]:
        """Return all known lookup keys."""
        return list(self._mapping)

    def lookup(self, key: str) -> list[str]:
        """Return the jobs subscribed to a key, in file order. Empty if none."""
        return list(self._mapping.get(key, ()))

    @classmethod
    def load(cls, path: str, file_matching: bool = False) -> "MappingTable":
        """Read and parse the mapping file at the given path."""
        logger.info("Reading mapping from file: %s", path)
        try:
            with open(path, encoding="utf-8", newline="") as f:
                return cls.parse(f, file_matching)
        except (OSError, UnicodeDecodeError) as exc:
            raise MappingLoadError(f"Cannot read mapping file {path}: {exc}") from exc

    @classmethod
    def parse(cls, lines: Iterable[str], file_matching: bool = False) -> "MappingTable":
        """Parse mapping records. Any malformed record aborts the whole load."""
        mapping: dict[str, list[str]] = {}
        count = 0
        reader = csv.reader(lines, delimiter=MAPPING_DELIMITER)

        try:
            for record in reader:
                if not record:
                    continue
                key = cls._record_key(record, reader.line_num, file_matching)
                mapping.setdefault(key, []).append(record[JOB_FIELD_INDEX])
                count += 1
        except csv.Error as exc:
            raise MappingLoadError(f"Invalid mapping file on line {reader.line_num}: {exc}") from exc

        logger.info("Successfully read mappings: %d", count)
        return cls(mapping, count)

    @staticmethod
    def _record_key(record: list[str], line_number: int, file_matching: bool) -> str:
        if file_matching:
            if len(record) != FILE_RECORD_FIELDS:
                raise MalformedRecordError(
                    line_number, len(record), f"exactly {FILE_RECORD_FIELDS} in file matching mode"
                )
            return build_key([record[0], record[1], record[3]])

        # Extra columns are tolerated and ignored
        if len(record) < PLAIN_RECORD_FIELDS:
            raise MalformedRecordError(
                line_number, len(record), f"at least {PLAIN_RECORD_FIELDS}"
            )
        return build_key(record[:2])
