"""Firehose activity entries."""

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

_USERACTION = 0x3
_UNIQUE_PID = 0x10
_CURRENT_AID = 0x1
_OTHER_AID = 0x200


@dataclass
class FirehoseActivity:
    """An activity log entry, as found in a firehose chunk."""

    unknown_activity_id: int = 0
    unknown_sentinel: int = 0
    pid: int = 0
    unknown_activity_id_2: int = 0
    unknown_sentinel_2: int = 0
    unknown_activity_id_3: int = 0
    unknown_sentinel_3: int = 0
    unknown_message_string_ref: int = 0
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
        """Resolve the base format string of this activity entry."""
        return get_strings_from_formatters(
            self.firehose_formatters,
            self.unknown_pc_id,
            provider,
            string_offset,
            first_proc_id,
            second_proc_id,
            catalog,
            True,
            "activity",
        )


def parse_activity(
    data: bytes, firehose_flags: int, log_type: int
) -> tuple[FirehoseActivity, bytes]:
    """Parse an activity entry; return it and the remaining bytes."""
    activity = FirehoseActivity()
    reader = ByteReader(data)

    # Useraction entries carry no first activity id or sentinel.
    if log_type != _USERACTION:
        activity.unknown_activity_id = reader.u32()
        activity.unknown_sentinel = reader.u32()

    if firehose_flags & _UNIQUE_PID:
        logger.debug("Activity Firehose log chunk has unique_pid flag")
        activity.pid = reader.u64()

    if firehose_flags & _CURRENT_AID:
        logger.debug("Activity Firehose log chunk has has_current_aid flag")
        activity.unknown_activity_id_2 = reader.u32()
        activity.unknown_sentinel_2 = reader.u32()

    if firehose_flags & _OTHER_AID:
        logger.debug("Activity Firehose log chunk has has_other_current_aid flag")
        activity.unknown_activity_id_3 = reader.u32()
        activity.unknown_sentinel_3 = reader.u32()

    activity.unknown_pc_id = reader.u32()

    formatters, rest = parse_formatter_flags(reader.remaining(), firehose_flags)
    activity.firehose_formatters = formatters
    return activity, rest