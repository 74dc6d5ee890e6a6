"""Records stored inside a log Catalog: process entries, subsystems and subchunks."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .binary import ByteReader, ParseError, padding_size_8

logger = logging.getLogger(__name__)

_LOAD_ADDRESS_SIZE = 6
_SUBSYSTEM_SIZE = 6
_OFFSET_SIZE = 2
LZ4_COMPRESSION = 0x100


@dataclass
class ProcessUUIDEntry:
    """A UUID referenced by a process entry, with the address range it covers."""

    size: int = 0
    unknown: int = 0
    catalog_uuid_index: int = 0
    load_address: int = 0
    uuid: str = ""


@dataclass
class ProcessInfoSubsystem:
    """Offsets of a subsystem and its category within the Catalog subsystem strings."""

    identifier: int = 0
    subsystem_offset: int = 0
    category_offset: int = 0


@dataclass
class ProcessInfoEntry:
    """Process information recorded in a Catalog."""

    index: int = 0
    unknown: int = 0
    catalog_main_uuid_index: int = 0
    catalog_dsc_uuid_index: int = 0
    first_number_proc_id: int = 0
    second_number_proc_id: int = 0
    pid: int = 0
    effective_user_id: int = 0
    unknown2: int = 0
    number_uuids_entries: int = 0
    unknown3: int = 0
    uuid_info_entries: list[ProcessUUIDEntry] = field(default_factory=list)
    number_subsystems: int = 0
    unknown4: int = 0
    subsystem_entries: list[ProcessInfoSubsystem] = field(default_factory=list)
    main_uuid: str = ""
    dsc_uuid: str = ""


@dataclass
class CatalogSubchunk:
    """Metadata describing one compressed chunkset referenced by the Catalog."""

    start: int = 0
    end: int = 0
    uncompressed_size: int = 0
    compression_algorithm: int = LZ4_COMPRESSION
    number_index: int = 0
    indexes: list[int] = field(default_factory=list)
    number_string_offsets: int = 0
    string_offsets: list[int] = field(default_factory=list)


def _lookup(uuids: list[str], index: int) -> str | None:
    return uuids[index] if 0 <= index < len(uuids) else None


def parse_process_uuid_entry(data: bytes, uuids: list[str]) -> tuple[ProcessUUIDEntry, bytes]:
    """Parse a process UUID entry; ``uuids`` is the Catalog UUID table it indexes into."""
    reader = ByteReader(data)
    size = reader.u32()
    unknown = reader.u32()
    catalog_uuid_index = reader.u16()
    load_address = int.from_bytes(reader.take(_LOAD_ADDRESS_SIZE), "little")

    uuid = _lookup(uuids, catalog_uuid_index)
    if uuid is None:
        raise ParseError(f"catalog UUID index {catalog_uuid_index} out of range")

    entry = ProcessUUIDEntry(
        size=size,
        unknown=unknown,
        catalog_uuid_index=catalog_uuid_index,
        load_address=load_address,
        uuid=uuid,
    )
    return entry, reader.remaining()


def parse_process_subsystem(data: bytes) -> tuple[ProcessInfoSubsystem, bytes]:
    """Parse one subsystem record of a process entry."""
    reader = ByteReader(data)
    subsystem = ProcessInfoSubsystem(
        identifier=reader.u16(),
        subsystem_offset=reader.u16(),
        category_offset=reader.u16(),
    )
    return subsystem, reader.remaining()


def parse_process_entry(data: bytes, uuids: list[str]) -> tuple[ProcessInfoEntry, bytes]:
    """Parse a Catalog process information entry, including its trailing padding."""
    reader = ByteReader(data)
    entry = ProcessInfoEntry(
        index=reader.u16(),
        unknown=reader.u16(),
        catalog_main_uuid_index=reader.u16(),
        catalog_dsc_uuid_index=reader.u16(),
        first_number_proc_id=reader.u64(),
        second_number_proc_id=reader.u32(),
        pid=reader.u32(),
        effective_user_id=reader.u32(),
        unknown2=reader.u32(),
        number_uuids_entries=reader.u32(),
        unknown3=reader.u32(),
    )

    rest = reader.remaining()
    for _ in range(entry.number_uuids_entries):
        uuid_entry, rest = parse_process_uuid_entry(rest, uuids)
        entry.uuid_info_entries.append(uuid_entry)

    reader = ByteReader(rest)
    entry.number_subsystems = reader.u32()
    entry.unknown4 = reader.u32()

    rest = reader.remaining()
    for _ in range(entry.number_subsystems):
        subsystem, rest = parse_process_subsystem(rest)
        entry.subsystem_entries.append(subsystem)

    main_uuid = _lookup(uuids, entry.catalog_main_uuid_index)
    if main_uuid is None:
        logger.warning("Could not find main UUID in catalog")
        main_uuid = ""
    entry.main_uuid = main_uuid
    entry.dsc_uuid = _lookup(uuids, entry.catalog_dsc_uuid_index) or ""

    reader = ByteReader(rest)
    reader.take(padding_size_8(entry.number_subsystems, _SUBSYSTEM_SIZE))
    return entry, reader.remaining()


def parse_catalog_subchunk(data: bytes) -> tuple[CatalogSubchunk, bytes]:
    """Parse Catalog subchunk metadata; only LZ4 compression is accepted."""
    reader = ByteReader(data)
    start = reader.u64()
    end = reader.u64()
    uncompressed_size = reader.u32()
    compression_algorithm = reader.u32()
    number_index = reader.u32()

    if compression_algorithm != LZ4_COMPRESSION:
        raise ParseError(f"unsupported catalog compression algorithm: {compression_algorithm:#x}")

    indexes = [reader.u16() for _ in range(number_index)]
    number_string_offsets = reader.u32()
    string_offsets = [reader.u16() for _ in range(number_string_offsets)]

    reader.take(padding_size_8(number_index + number_string_offsets, _OFFSET_SIZE))

    subchunk = CatalogSubchunk(
        start=start,
        end=end,
        uncompressed_size=uncompressed_size,
        compression_algorithm=compression_algorithm,
        number_index=number_index,
        indexes=indexes,
        number_string_offsets=number_string_offsets,
        string_offsets=string_offsets,
    )
    return subchunk, reader.remaining()