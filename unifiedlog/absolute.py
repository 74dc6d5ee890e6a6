"""Format strings of log entries whose image is located by an absolute address."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .binary import extract_string
from .provider import (
    FileProvider,
    MessageData,
    UUIDText,
    get_catalog_dsc,
    get_uuid_image_path,
    uuidtext_image_path,
)

if TYPE_CHECKING:
    from .catalog import CatalogChunk

logger = logging.getLogger(__name__)

_DYNAMIC_FLAG = 0x80000000


def _library_uuid(
    catalog: CatalogChunk, absolute_offset: int, first_proc_id: int, second_proc_id: int
) -> str:
    """Return the UUID whose load range contains ``absolute_offset``, or an empty string."""
    entry = catalog.process_entry(first_proc_id, second_proc_id)
    if entry is None:
        return ""
    for uuid_entry in entry.uuid_info_entries:
        if uuid_entry.load_address <= absolute_offset <= uuid_entry.load_address + uuid_entry.size:
            logger.debug("Absolute uuid file is: %s", uuid_entry.uuid)
            return uuid_entry.uuid
    return ""


def _find_string(uuidtext: UUIDText, string_offset: int) -> str | None:
    footer = uuidtext.footer_data
    string_start = 0
    for entry in uuidtext.entry_descriptors:
        if entry.range_start_offset > string_offset:
            string_start += entry.entry_size
            continue
        offset = string_offset - entry.range_start_offset
        if len(footer) < offset + string_start or offset > entry.entry_size:
            string_start += entry.entry_size
            continue
        return extract_string(footer[offset + string_start:])
    return None


def extract_absolute_strings(
    provider: FileProvider,
    absolute_offset: int,
    string_offset: int,
    first_proc_id: int,
    second_proc_id: int,
    catalog: CatalogChunk,
    original_offset: int,
) -> MessageData:
    """Resolve a format string for a log entry carrying the absolute formatter flag."""
    logger.debug("Extracting format string from UUID file for log entry with Absolute flag")
    library_uuid = _library_uuid(catalog, absolute_offset, first_proc_id, second_proc_id)
    _, main_uuid = get_catalog_dsc(catalog, first_proc_id, second_proc_id)
    message = MessageData(library_uuid=library_uuid, process_uuid=main_uuid)

    if provider.cached_uuidtext(main_uuid) is None:
        provider.update_uuid(main_uuid, library_uuid)
    if provider.cached_uuidtext(library_uuid) is None:
        provider.update_uuid(library_uuid, main_uuid)

    data = provider.cached_uuidtext(library_uuid)
    if data is None:
        logger.warning(
            "Failed to get message string from absolute UUIDText file: %s", library_uuid
        )
        message.format_string = (
            f"Failed to get string message from absolute UUIDText file: {library_uuid}"
        )
        return message

    if original_offset & _DYNAMIC_FLAG or string_offset == absolute_offset:
        format_string = "%s"
    else:
        found = _find_string(data, string_offset)
        if found is None:
            format_string = (
                f"Error: Invalid offset {string_offset} for absolute UUID {library_uuid}"
            )
        else:
            format_string = found

    message.library = uuidtext_image_path(data.footer_data, data.entry_descriptors)
    message.format_string = format_string
    message.process = get_uuid_image_path(main_uuid, provider)
    return message