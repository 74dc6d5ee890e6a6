"""Choosing where a log entry's format string lives, and alternative-UUID lookups."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .absolute import extract_absolute_strings
from .binary import ParseError, extract_string
from .formats import extract_format_strings
from .provider import (
    FileProvider,
    MessageData,
    UUIDText,
    get_catalog_dsc,
    get_uuid_image_path,
    uuidtext_image_path,
)
from .shared import extract_shared_strings

if TYPE_CHECKING:
    from .catalog import CatalogChunk
    from .flags import FirehoseFormatters

logger = logging.getLogger(__name__)

_DYNAMIC_FLAG = 0x80000000
_U32_MASK = 0xFFFFFFFF
_U64_MAX = (1 << 64) - 1
_SHARED_CACHE_LARGE_OFFSET = 8


def _find_alt_string(uuidtext: UUIDText, string_offset: int) -> str | None:
    """Return the format string at ``string_offset``, or None if no range holds it."""
    footer = uuidtext.footer_data
    target = string_offset & _U32_MASK
    string_start = 0
    for entry in uuidtext.entry_descriptors:
        if entry.range_start_offset > target:
            string_start += entry.entry_size
            continue
        offset = target - entry.range_start_offset
        # An offset past the entry size means this is not the right range.
        if len(footer) < offset or offset > entry.entry_size:
            string_start += entry.entry_size
            continue
        start = offset + string_start
        if start > len(footer):
            raise ParseError(f"format string offset {start} beyond {len(footer)} bytes")
        return extract_string(footer[start:])
    return None


def extract_alt_uuid_strings(
    provider: FileProvider,
    string_offset: int,
    uuid: str,
    first_proc_id: int,
    second_proc_id: int,
    catalog: CatalogChunk,
    original_offset: int,
) -> MessageData:
    """Resolve a format string from the UUIDText file named inside the log entry itself."""
    logger.debug("Extracting format string from alt uuid")
    _, main_uuid = get_catalog_dsc(catalog, first_proc_id, second_proc_id)
    message = MessageData(library_uuid=uuid, process_uuid=main_uuid)

    if provider.cached_uuidtext(uuid) is None:
        provider.update_uuid(uuid, main_uuid)
    if provider.cached_uuidtext(main_uuid) is None:
        provider.update_uuid(main_uuid, uuid)

    data = provider.cached_uuidtext(uuid)
    if data is None:
        logger.warning("Failed to get message string from alternative UUIDText file: %s", uuid)
        message.format_string = (
            f"Failed to get string message from alternative UUIDText file: {uuid}"
        )
        return message

    if original_offset & _DYNAMIC_FLAG:
        format_string = "%s"
    else:
        found = _find_alt_string(data, string_offset)
        if found is None:
            format_string = f"Error: Invalid offset {string_offset} for alternative UUID {uuid}"
        else:
            format_string = found

    message.library = uuidtext_image_path(data.footer_data, data.entry_descriptors)
    message.process = get_uuid_image_path(main_uuid, provider)
    message.format_string = format_string
    return message


def _hex_offset(text: str, entry_kind: str, what: str) -> int:
    value = int(text, 16)
    if value > _U64_MAX:
        logger.error(
            "Failed to get %s offset to format string for %s firehose entry", what, entry_kind
        )
        raise ParseError(
            f"failed to get {what} offset to format string for {entry_kind} firehose entry"
        )
    return value


def get_strings_from_formatters(
    formatters: FirehoseFormatters,
    unknown_pc_id: int,
    provider: FileProvider,
    string_offset: int,
    first_proc_id: int,
    second_proc_id: int,
    catalog: CatalogChunk,
    require_large_offset: bool,
    entry_kind: str,
) -> MessageData:
    """Resolve the base format string of a firehose entry from its formatter flags.

    With ``require_large_offset`` the large shared cache path also needs a non-zero
    ``has_large_offset``; ``entry_kind`` labels error messages.
    """
    shared_cache_condition = formatters.shared_cache or (
        formatters.large_shared_cache != 0
        and (not require_large_offset or formatters.has_large_offset != 0)
    )

    if shared_cache_condition:
        if formatters.has_large_offset != 0:
            large_offset = formatters.has_large_offset
            if large_offset != formatters.large_shared_cache // 2 and not formatters.shared_cache:
                # Mismatched offsets: recover using the large shared cache value.
                large_offset = formatters.large_shared_cache // 2
                text = f"{large_offset:X}{string_offset:08X}"
            elif formatters.shared_cache:
                text = f"{0x10000000 * _SHARED_CACHE_LARGE_OFFSET + string_offset:X}"
            else:
                text = f"{large_offset:X}{string_offset:08X}"
            offset = _hex_offset(text, entry_kind, "shared string")
            return extract_shared_strings(
                provider, offset, first_proc_id, second_proc_id, catalog, string_offset
            )
        return extract_shared_strings(
            provider, string_offset, first_proc_id, second_proc_id, catalog, string_offset
        )

    if formatters.absolute:
        text = f"{formatters.main_exe_alt_index:X}{unknown_pc_id:08X}"
        offset = _hex_offset(text, entry_kind, "absolute")
        return extract_absolute_strings(
            provider,
            offset,
            string_offset,
            first_proc_id,
            second_proc_id,
            catalog,
            string_offset,
        )

    if formatters.uuid_relative:
        return extract_alt_uuid_strings(
            provider,
            string_offset,
            formatters.uuid_relative,
            first_proc_id,
            second_proc_id,
            catalog,
            string_offset,
        )

    return extract_format_strings(
        provider, string_offset, first_proc_id, second_proc_id, catalog, string_offset
    )