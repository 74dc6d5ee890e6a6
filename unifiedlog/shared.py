"""Format strings resolved from shared cache strings (dsc) files."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from .binary import ParseError, extract_string
from .provider import (
    DscRange,
    FileProvider,
    MessageData,
    SharedCacheStrings,
    get_catalog_dsc,
    get_uuid_image_path,
)

if TYPE_CHECKING:
    from .catalog import CatalogChunk

logger = logging.getLogger(__name__)

_DYNAMIC_FLAG = 0x80000000


def _describe(
    dsc: SharedCacheStrings,
    dsc_range: DscRange,
    main_uuid: str,
    provider: FileProvider,
    format_string: str,
) -> MessageData:
    index = dsc_range.unknown_uuid_index
    if index >= len(dsc.uuids):
        logger.warning(
            "UUID index %d out of bounds (max: %d). Malformed data.", index, len(dsc.uuids)
        )
        return MessageData(format_string="Error: Invalid UUID index")
    image = dsc.uuids[index]
    return MessageData(
        library=image.path_string,
        library_uuid=image.uuid,
        format_string=format_string,
        process_uuid=main_uuid,
        process=get_uuid_image_path(main_uuid, provider),
    )


def extract_shared_strings(
    provider: FileProvider,
    string_offset: int,
    first_proc_id: int,
    second_proc_id: int,
    catalog: CatalogChunk,
    original_offset: int,
) -> MessageData:
    """Resolve a format string, library and process from the shared cache of a log entry."""
    dsc_uuid, main_uuid = get_catalog_dsc(catalog, first_proc_id, second_proc_id)

    if provider.cached_dsc(dsc_uuid) is None:
        provider.update_dsc(dsc_uuid, main_uuid)
    if provider.cached_uuidtext(main_uuid) is None:
        provider.update_uuid(main_uuid, main_uuid)

    dsc = provider.cached_dsc(dsc_uuid)

    if original_offset & _DYNAMIC_FLAG and dsc is not None and dsc.ranges:
        return _describe(dsc, dsc.ranges[0], main_uuid, provider, "%s")

    if dsc is not None:
        logger.debug("Associated dsc file with log entry: %s", dsc_uuid)
        for dsc_range in dsc.ranges:
            start = dsc_range.range_offset
            if not start <= string_offset < start + dsc_range.range_size:
                continue
            offset = string_offset - start
            # The string begins in the next range when the offset hits this range's end.
            if offset == len(dsc_range.strings):
                continue
            if offset > len(dsc_range.strings):
                raise ParseError(
                    f"shared string offset {offset} beyond {len(dsc_range.strings)} bytes"
                )
            message = extract_string(dsc_range.strings[offset:])
            return _describe(dsc, dsc_range, main_uuid, provider, message)

        if dsc.ranges:
            return _describe(
                dsc, dsc.ranges[0], main_uuid, provider, "Error: Invalid shared string offset"
            )

    logger.warning("Failed to get message string from Shared Strings DSC file")
    return MessageData(format_string="Unknown shared string message")