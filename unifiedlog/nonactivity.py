"""Firehose non-activity entries: ordinary log messages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .binary import ByteReader
from .flags import FirehoseFormatters, parse_formatter_flags
from .resolve import get_strings_from_formatters

if TYPE_CHECKING:
    from .catalog import CatalogChunk
    from .provider import FileProvider, MessageData

logger = logging.getLogger(__name__)

_CURRENT_AID = 0x1
_PRIVATE_DATA = 0x100
_HAS_SUBSYSTEM = 0x200
_HAS_RULES = 0x400
_HAS_OVERSIZE = 0x800


@dataclass
class FirehoseNonActivity:
    """A non-activity log entry, as found in a firehose chunk."""

    unknown_activity_id: int = 0
    unknown_sentinel: int = 0
    private_strings_offset: int = 0
    private_strings_size: int = 0
    unknown_message_string_ref: int = 0
    subsystem_value: int = 0
    ttl_value: int = 0
    data_ref_value: int = 0
    unknown_pc_id: int = 0
    firehose_formatters: FirehoseFormatters = field(default_factory=FirehoseFormatters)

    def get_strings(
        self,
        provider: FileProvider,
        string_offset: int,
        first_proc_id: int,
        second_proc_id: int,
        catalog: CatalogChunk,
    ) -> MessageData:
        """Resolve the base format string of this non-activity entry."""
        return get_strings_from_formatters(
            self.firehose_formatters,
            self.unknown_pc_id,
            provider,
            string_offset,
            first_proc_id,
            second_proc_id,
            catalog,
            False,
            "non-activity",
        )


def parse_non_activity(data: bytes, firehose_flags: int) -> tuple[FirehoseNonActivity, bytes]:
    """Parse a non-activity entry; return it and the remaining bytes."""
    entry = FirehoseNonActivity()
    reader = ByteReader(data)

    if firehose_flags & _CURRENT_AID:
        logger.debug("Non-Activity Firehose log chunk has has_current_aid flag")
        entry.unknown_activity_id = reader.u32()
        entry.unknown_sentinel = reader.u32()

    # Private string values follow the public data; these locate them.
    if firehose_flags & _PRIVATE_DATA:
        logger.debug("Non-Activity Firehose log chunk has has_private_data flag")
        entry.private_strings_offset = reader.u16()
        entry.private_strings_size = reader.u16()

    entry.unknown_pc_id = reader.u32()

    formatters, rest = parse_formatter_flags(reader.remaining(), firehose_flags)
    entry.firehose_formatters = formatters
    reader = ByteReader(rest)

    if firehose_flags & _HAS_SUBSYSTEM:
        logger.debug("Non-Activity Firehose log chunk has has_subsystem flag")
        entry.subsystem_value = reader.u16()

    if firehose_flags & _HAS_RULES:
        logger.debug("Non-Activity Firehose log chunk has has_rules flag")
        entry.ttl_value = reader.u8()

    if firehose_flags & _HAS_OVERSIZE:
        logger.debug("Non-Activity Firehose log chunk has has_oversize flag")
        entry.data_ref_value = reader.u32()

    return entry, reader.remaining()