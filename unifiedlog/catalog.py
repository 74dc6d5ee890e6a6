"""The log Catalog: process, subsystem and chunkset metadata for a set of log entries."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .binary import ByteReader, ParseError, extract_string
from .records import (
    CatalogSubchunk,
    ProcessInfoEntry,
    parse_catalog_subchunk,
    parse_process_entry,
)

logger = logging.getLogger(__name__)

_UNKNOWN_LENGTH = 6
_UUID_LENGTH = 16


@dataclass
class SubsystemInfo:
    """Subsystem (bundle id) and category of a log entry."""

    subsystem: str = ""
    category: str = ""


@dataclass
class CatalogChunk:
    """A parsed Catalog chunk. Process entries are keyed by (first, second) proc id."""

    chunk_tag: int = 0
    chunk_sub_tag: int = 0
    chunk_data_size: int = 0
    catalog_subsystem_strings_offset: int = 0
    catalog_process_info_entries_offset: int = 0
    number_process_information_entries: int = 0
    catalog_offset_sub_chunks: int = 0
    number_sub_chunks: int = 0
    unknown: bytes = b""
    earliest_firehose_timestamp: int = 0
    catalog_uuids: list[str] = field(default_factory=list)
    catalog_subsystem_strings: bytes = b""
    catalog_process_info_entries: dict[tuple[int, int], ProcessInfoEntry] = field(
        default_factory=dict
    )
    catalog_subchunks: list[CatalogSubchunk] = field(default_factory=list)

    def process_entry(self, first_proc_id: int, second_proc_id: int) -> ProcessInfoEntry | None:
        """Return the process entry for the given proc ids, if recorded."""
        return self.catalog_process_info_entries.get((first_proc_id, second_proc_id))

    def get_subsystem(
        self, subsystem_value: int, first_proc_id: int, second_proc_id: int
    ) -> SubsystemInfo:
        """Look up the subsystem and category of a log entry."""
        entry = self.process_entry(first_proc_id, second_proc_id)
        if entry is not None:
            for subsystem in entry.subsystem_entries:
                if subsystem.identifier == subsystem_value:
                    return SubsystemInfo(
                        subsystem=self._string_at(subsystem.subsystem_offset),
                        category=self._string_at(subsystem.category_offset),
                    )
        return SubsystemInfo(subsystem="Unknown subsystem")

    def get_pid(self, first_proc_id: int, second_proc_id: int) -> int:
        """Return the process id of a log entry, or 0 if unknown."""
        entry = self.process_entry(first_proc_id, second_proc_id)
        if entry is None:
            logger.warning("Did not find PID in log Catalog")
            return 0
        return entry.pid

    def get_euid(self, first_proc_id: int, second_proc_id: int) -> int:
        """Return the effective user id of a log entry, or 0 if unknown."""
        entry = self.process_entry(first_proc_id, second_proc_id)
        if entry is None:
            logger.warning("Did not find EUID in log Catalog")
            return 0
        return entry.effective_user_id

    def _string_at(self, offset: int) -> str:
        strings = self.catalog_subsystem_strings
        if offset > len(strings):
            raise ParseError(f"subsystem string offset {offset} beyond {len(strings)} bytes")
        return extract_string(strings[offset:])


def parse_catalog(data: bytes) -> tuple[CatalogChunk, bytes]:
    """Parse a Catalog chunk; return it and the remaining bytes."""
    reader = ByteReader(data)
    catalog = CatalogChunk(
        chunk_tag=reader.u32(),
        chunk_sub_tag=reader.u32(),
        chunk_data_size=reader.u64(),
        catalog_subsystem_strings_offset=reader.u16(),
        catalog_process_info_entries_offset=reader.u16(),
        number_process_information_entries=reader.u16(),
        catalog_offset_sub_chunks=reader.u16(),
        number_sub_chunks=reader.u16(),
        unknown=reader.take(_UNKNOWN_LENGTH),
        earliest_firehose_timestamp=reader.u64(),
    )

    number_uuids = catalog.catalog_subsystem_strings_offset // _UUID_LENGTH
    catalog.catalog_uuids = [
        format(reader.be_uint(_UUID_LENGTH), "032X") for _ in range(number_uuids)
    ]

    strings_length = (
        catalog.catalog_process_info_entries_offset - catalog.catalog_subsystem_strings_offset
    )
    if strings_length < 0:
        raise ParseError("catalog process entries offset precedes subsystem strings offset")
    catalog.catalog_subsystem_strings = reader.take(strings_length)

    rest = reader.remaining()
    for _ in range(catalog.number_process_information_entries):
        entry, rest = parse_process_entry(rest, catalog.catalog_uuids)
        key = (entry.first_number_proc_id, entry.second_number_proc_id)
        catalog.catalog_process_info_entries[key] = entry

    for _ in range(catalog.number_sub_chunks):
        subchunk, rest = parse_catalog_subchunk(rest)
        catalog.catalog_subchunks.append(subchunk)

    return catalog, rest