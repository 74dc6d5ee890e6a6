"""Firehose signpost entries."""

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
_HAS_NAME = 0x8000


@dataclass
class FirehoseSignpost:
    """A signpost log entry, as found in a firehose chunk."""

    unknown_pc_id: int = 0
    unknown_activity_id: int = 0
    unknown_sentinel: int = 0
    subsystem: int = 0
    signpost_id: int = 0
    signpost_name: int = 0
    private_strings_offset: int = 0
    private_strings_size: int = 0
    ttl_value: int = 0
    data_ref_value: int = 0
    firehose_formatters: FirehoseFormatters = field(default_factory=FirehoseFormatters)

    def get_strings(
        self,
        provider: FileProvider,
        string_offset: int,
        first_proc_id: int,
        second_proc_id: int,
        catalog: CatalogChunk,
    ) -> MessageData:
        """Resolve the base format string of this signpost entry."""
        return get_strings_from_formatters(
            self.firehose_formatters,
            self.unknown_pc_id,
            provider,
            string_offset,
            first_proc_id,
            second_proc_id,
            catalog,
            True,
            "signpost",
        )


def parse_signpost(data: bytes, firehose_flags: int) -> tuple[FirehoseSignpost, bytes]:
    """Parse a signpost entry; return it and the remaining bytes."""
    signpost = FirehoseSignpost()
    reader = ByteReader(data)

    if firehose_flags & _CURRENT_AID:
        logger.debug("Signpost Firehose has has_current_aid flag")
        signpost.unknown_activity_id = reader.u32()
        signpost.unknown_sentinel = reader.u32()

    if firehose_flags & _PRIVATE_DATA:
        logger.debug("Signpost Firehose has has_private_data flag")
        signpost.private_strings_offset = reader.u16()
        signpost.private_strings_size = reader.u16()

    signpost.unknown_pc_id = reader.u32()

    formatters, rest = parse_formatter_flags(reader.remaining(), firehose_flags)
    signpost.firehose_formatters = formatters
    reader = ByteReader(rest)

    if firehose_flags & _HAS_SUBSYSTEM:
        logger.debug("Signpost Firehose log chunk has has_subsystem flag")
        signpost.subsystem = reader.u16()

    signpost.signpost_id = reader.u64()

    if firehose_flags & _HAS_RULES:
        logger.debug("Signpost Firehose log chunk has has_rules flag")
        signpost.ttl_value = reader.u8()

    if firehose_flags & _HAS_OVERSIZE:
        logger.debug("Signpost Firehose log chunk has has_oversize flag")
        signpost.data_ref_value = reader.u32()

    if firehose_flags & _HAS_NAME:
        logger.debug("Signpost Firehose log chunk has has_name flag")
        signpost.signpost_name = reader.u32()
        # With a large shared cache the name is followed by a copy of that value.
        if signpost.firehose_formatters.large_shared_cache != 0:
            reader.take(2)

    return signpost, reader.remaining()