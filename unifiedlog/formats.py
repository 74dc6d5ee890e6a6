"""Format strings resolved from the UUIDText file of a log entry's main executable."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .binary import extract_string
from .provider import (
    FileProvider,
    MessageData,
    UUIDText,
    get_catalog_dsc,
    uuidtext_image_path,
)

if TYPE_CHECKING:
    from .catalog import CatalogChunk

logger = logging.getLogger(__name__)

_DYNAMIC_FLAG = 0x80000000
_U32_MASK = 0xFFFFFFFF


def _find_string(uuidtext: UUIDText, string_offset: int) -> str | None:
    """Return the format string at ``string_offset``, or None if no range holds it."""
    footer = uuidtext.footer_data
    target = string_offset & _U32_MASK
    string_start = 0
    for entry in uuidtext.entry_descriptors:
        if entry.range_start_offset > target:
            string_start += entry.entry_size
            continue
        offset = target - entry.range_start_offset
        if len(footer) < offset + string_start or offset > entry.entry_size:
            string_start += entry.entry_size
            continue
        return extract_string(footer[offset + string_start:])
    return None


def extract_format_strings(
    provider: FileProvider,
    string_offset: int,
    first_proc_id: int,
    second_proc_id: int,
    catalog: CatalogChunk,
    original_offset: int,
) -> MessageData:
    """Resolve a format string and image path from the main executable's UUIDText file."""
    logger.debug("Extracting format string from UUID file")
    _, main_uuid = get_catalog_dsc(catalog, first_proc_id, second_proc_id)
    message = MessageData(library_uuid=main_uuid, process_uuid=main_uuid)

    if provider.cached_uuidtext(main_uuid) is None:
        provider.update_uuid(main_uuid, main_uuid)

    data = provider.cached_uuidtext(main_uuid)
    if data is None:
        logger.warning("Failed to get message string from UUIDText file: %s", main_uuid)
        message.format_string = f"Failed to get string message from UUIDText file: {main_uuid}"
        return message

    image_path = uuidtext_image_path(data.footer_data, data.entry_descriptors)

    if original_offset & _DYNAMIC_FLAG:
        format_string = "%s"
    else:
        found = _find_string(data, string_offset)
        if found is None:
            format_string = f"Error: Invalid offset {string_offset} for UUID {main_uuid}"
        else:
            format_string = found

    message.format_string = format_string
    message.process = image_path
    message.library = image_path
    return message