"""String sources for log entries: UUIDText files, shared caches and the providers that hold them."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .binary import ParseError, extract_string

if TYPE_CHECKING:
    from .catalog import CatalogChunk

logger = logging.getLogger(__name__)

ZERO_UUID = "0" * 32


@dataclass
class MessageData:
    """Base format string of a log entry and the images it came from."""

    library: str = ""
    format_string: str = ""
    process: str = ""
    library_uuid: str = ""
    process_uuid: str = ""


@dataclass
class UUIDTextEntry:
    """A range of format-string offsets covered by a UUIDText file."""

    range_start_offset: int = 0
    entry_size: int = 0


@dataclass
class UUIDText:
    """A UUIDText file: string ranges followed by the image path in the footer."""

    entry_descriptors: list[UUIDTextEntry] = field(default_factory=list)
    footer_data: bytes = b""


@dataclass
class DscRange:
    """A range of strings inside a shared cache strings file."""

    range_offset: int = 0
    range_size: int = 0
    unknown_uuid_index: int = 0
    strings: bytes = b""


@dataclass
class DscUuid:
    """An image referenced by a shared cache strings file."""

    uuid: str = ""
    path_string: str = ""


@dataclass
class SharedCacheStrings:
    """A shared cache strings (dsc) file."""

    ranges: list[DscRange] = field(default_factory=list)
    uuids: list[DscUuid] = field(default_factory=list)


class FileProvider(ABC):
    """Source of UUIDText and shared cache data, with a lookup cache."""

    @abstractmethod
    def cached_uuidtext(self, uuid: str) -> UUIDText | None:
        """Return a UUIDText file already in the cache."""

    @abstractmethod
    def cached_dsc(self, uuid: str) -> SharedCacheStrings | None:
        """Return a shared cache strings file already in the cache."""

    @abstractmethod
    def update_uuid(self, uuid: str, other_uuid: str) -> None:
        """Load the UUIDText files ``uuid`` and ``other_uuid`` into the cache."""

    @abstractmethod
    def update_dsc(self, dsc_uuid: str, main_uuid: str) -> None:
        """Load the shared cache ``dsc_uuid`` and UUIDText ``main_uuid`` into the cache."""


class MemoryProvider(FileProvider):
    """Provider whose files are held in memory; files enter the cache when updated."""

    def __init__(self) -> None:
        self._uuidtext_store: dict[str, UUIDText] = {}
        self._dsc_store: dict[str, SharedCacheStrings] = {}
        self._uuidtext_cache: dict[str, UUIDText] = {}
        self._dsc_cache: dict[str, SharedCacheStrings] = {}

    def add_uuidtext(self, uuid: str, uuidtext: UUIDText) -> None:
        """Make a UUIDText file available for loading."""
        self._uuidtext_store[uuid] = uuidtext

    def add_dsc(self, uuid: str, dsc: SharedCacheStrings) -> None:
        """Make a shared cache strings file available for loading."""
        self._dsc_store[uuid] = dsc

    def cached_uuidtext(self, uuid: str) -> UUIDText | None:
        return self._uuidtext_cache.get(uuid)

    def cached_dsc(self, uuid: str) -> SharedCacheStrings | None:
        return self._dsc_cache.get(uuid)

    def _load_uuidtext(self, uuid: str) -> None:
        data = self._uuidtext_store.get(uuid)
        if data is None:
            logger.warning("UUIDText file not found: %s", uuid)
        else:
            self._uuidtext_cache[uuid] = data

    def update_uuid(self, uuid: str, other_uuid: str) -> None:
        for name in dict.fromkeys((uuid, other_uuid)):
            if name and name not in self._uuidtext_cache:
                self._load_uuidtext(name)

    def update_dsc(self, dsc_uuid: str, main_uuid: str) -> None:
        dsc = self._dsc_store.get(dsc_uuid)
        if dsc is None:
            logger.warning("Shared cache strings file not found: %s", dsc_uuid)
        else:
            self._dsc_cache[dsc_uuid] = dsc
        if main_uuid and main_uuid not in self._uuidtext_cache:
            self._load_uuidtext(main_uuid)


def uuidtext_image_path(data: bytes, entries: list[UUIDTextEntry]) -> str:
    """Return the image path stored after all string ranges of a UUIDText footer."""
    offset = sum(entry.entry_size for entry in entries)
    if offset > len(data):
        raise ParseError(f"image path offset {offset} beyond {len(data)} bytes of footer")
    return extract_string(data[offset:])


def get_uuid_image_path(main_uuid: str, provider: FileProvider) -> str:
    """Return the image path of a cached UUIDText file, or a failure message."""
    if main_uuid == ZERO_UUID:
        logger.info("Got UUID of all zeros from Catalog")
        return ""
    data = provider.cached_uuidtext(main_uuid)
    if data is not None:
        return uuidtext_image_path(data.footer_data, data.entry_descriptors)
    logger.warning("Failed to get path string from UUIDText file for entry: %s", main_uuid)
    return f"Failed to get path string from UUIDText file for entry: {main_uuid}"


def get_catalog_dsc(
    catalog: CatalogChunk, first_proc_id: int, second_proc_id: int
) -> tuple[str, str]:
    """Return the (dsc UUID, main UUID) recorded for a process, empty strings if unknown."""
    entry = catalog.process_entry(first_proc_id, second_proc_id)
    if entry is None:
        return "", ""
    return entry.dsc_uuid, entry.main_uuid