"""Firehose formatter flags: where a log entry's base format string lives."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .binary import ByteReader, ParseError

logger = logging.getLogger(__name__)

_MAIN_EXE = 0x2
_LARGE_SHARED_CACHE = 0xC
_LARGE_OFFSET = 0x20
_FLAG_CHECK = 0xE


@dataclass
class FirehoseFormatters:
    """Formatter details parsed from a firehose entry."""

    main_exe: bool = False
    shared_cache: bool = False
    has_large_offset: int = 0
    large_shared_cache: int = 0
    absolute: bool = False
    uuid_relative: str = ""
    main_plugin: bool = False
    pc_style: bool = False
    main_exe_alt_index: int = 0


def parse_formatter_flags(data: bytes, firehose_flags: int) -> tuple[FirehoseFormatters, bytes]:
    """Parse formatter data selected by ``firehose_flags``; return it and the remaining bytes."""
    formatters = FirehoseFormatters()
    reader = ByteReader(data)

    kind = firehose_flags & _FLAG_CHECK
    if kind == 0xC:
        logger.debug("Firehose flag: large_shared_cache")
        if firehose_flags & _LARGE_OFFSET:
            formatters.has_large_offset = reader.u16()
        formatters.large_shared_cache = reader.u16()
    elif kind == 0x8:
        logger.debug("Firehose flag: absolute")
        formatters.absolute = True
        if not firehose_flags & _MAIN_EXE:
            formatters.main_exe_alt_index = reader.u16()
    elif kind == 0x2:
        logger.debug("Firehose flag: main_exe")
        formatters.main_exe = True
    elif kind == 0x4:
        logger.debug("Firehose flag: shared_cache")
        formatters.shared_cache = True
        if firehose_flags & _LARGE_OFFSET:
            formatters.has_large_offset = reader.u16()
    elif kind == 0xA:
        logger.debug("Firehose flag: uuid_relative")
        formatters.uuid_relative = format(reader.be_uint(16), "X")
    else:
        raise ParseError(f"unknown firehose formatter flag: {firehose_flags:#x}")

    return formatters, reader.remaining()