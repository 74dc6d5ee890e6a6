import struct

import pytest

from unifiedlog.binary import ParseError
from unifiedlog.catalog import CatalogChunk
from unifiedlog.flags import FirehoseFormatters
from unifiedlog.nonactivity import FirehoseNonActivity, parse_non_activity
from unifiedlog.provider import (
    DscRange,
    DscUuid,
    MemoryProvider,
    SharedCacheStrings,
    UUIDText,
    UUIDTextEntry,
)
from unifiedlog.records import ProcessInfoEntry

MAIN_UUID = "6C3ADF991F033C1C96C4ADFAA12D8CED"
DSC_UUID = "80896B329EB13A10A7C5449B15305DE2"
LIB_UUID = "D8E5AF1CAF4F3CEB8731E6F240E8EA7D"
PROCESS_PATH = "/usr/libexec/lightsoutmanagementd"
LIB_PATH = "/System/Library/PrivateFrameworks/AppleLOM.framework/Versions/A/AppleLOM"


def _catalog():
    entry = ProcessInfoEntry(
        first_number_proc_id=45,
        second_number_proc_id=188,
        main_uuid=MAIN_UUID,
        dsc_uuid=DSC_UUID,
    )
    return CatalogChunk(catalog_process_info_entries={(45, 188): entry})


def _provider(range_offset=100):
    provider = MemoryProvider()
    footer = b"LOMD Start\x00" + PROCESS_PATH.encode() + b"\x00"
    provider.add_uuidtext(
        MAIN_UUID,
        UUIDText(
            entry_descriptors=[UUIDTextEntry(range_start_offset=0, entry_size=11)],
            footer_data=footer,
        ),
    )
    provider.add_dsc(
        DSC_UUID,
        SharedCacheStrings(
            ranges=[
                DscRange(
                    range_offset=range_offset,
                    range_size=20,
                    unknown_uuid_index=0,
                    strings=b"%@ start\x00other\x00\x00\x00\x00\x00\x00",
                )
            ],
            uuids=[DscUuid(uuid=LIB_UUID, path_string=LIB_PATH)],
        ),
    )
    return provider


def test_parse_non_activity():
    test_data = bytes(
        [
            122, 179, 12, 13, 2, 0, 4, 0, 41, 0, 34, 9, 32, 4, 0, 0, 1, 0, 32, 4, 1, 0, 1, 0, 32,
            4, 2, 0, 14, 0, 0, 8, 2, 0, 0, 0, 0, 0, 0, 0, 0, 8, 0, 0, 0, 0, 0, 0, 0, 0, 0, 8, 2, 0,
            0, 0, 0, 0, 0, 0, 0, 4, 0, 0, 0, 0, 0, 4, 1, 0, 0, 0, 0, 4, 1, 0, 0, 0, 0, 0, 100, 105,
            115, 112, 97, 116, 99, 104, 69, 118, 101, 110, 116, 0,
        ]
    )
    results, rest = parse_non_activity(test_data, 556)
    assert results.unknown_activity_id == 0
    assert results.unknown_sentinel == 0
    assert results.private_strings_offset == 0
    assert results.private_strings_size == 0
    assert results.unknown_message_string_ref == 0
    assert results.firehose_formatters.main_exe_alt_index == 0
    assert results.firehose_formatters.uuid_relative == ""
    assert not results.firehose_formatters.main_exe
    assert not results.firehose_formatters.absolute
    assert results.subsystem_value == 41
    assert results.ttl_value == 0
    assert results.data_ref_value == 0
    assert results.firehose_formatters.large_shared_cache == 4
    assert results.firehose_formatters.has_large_offset == 2
    assert results.unknown_pc_id == 218936186
    assert rest == test_data[10:]


def test_parse_non_activity_all_optional_fields():
    flags = 0x1 | 0x100 | 0x2 | 0x400 | 0x800
    data = (
        struct.pack("<II", 5, 0x80000000)
        + struct.pack("<HH", 0x10, 0x20)
        + struct.pack("<I", 7)
        + struct.pack("<B", 3)
        + struct.pack("<I", 9)
        + b"xy"
    )
    results, rest = parse_non_activity(data, flags)
    assert results.unknown_activity_id == 5
    assert results.unknown_sentinel == 0x80000000
    assert results.private_strings_offset == 0x10
    assert results.private_strings_size == 0x20
    assert results.unknown_pc_id == 7
    assert results.firehose_formatters.main_exe
    assert results.ttl_value == 3
    assert results.data_ref_value == 9
    assert rest == b"xy"


def test_parse_non_activity_truncated():
    with pytest.raises(ParseError):
        parse_non_activity(bytes([1, 2]), 0x2)


def test_parse_non_activity_unknown_formatter():
    with pytest.raises(ParseError):
        parse_non_activity(bytes([1, 2, 3, 4, 0, 0]), 0x0)


def test_get_strings_main_exe():
    entry = FirehoseNonActivity(firehose_formatters=FirehoseFormatters(main_exe=True))
    message = entry.get_strings(_provider(), 0, 45, 188, _catalog())
    assert message.format_string == "LOMD Start"
    assert message.process == PROCESS_PATH
    assert message.library == PROCESS_PATH
    assert message.process_uuid == MAIN_UUID
    assert message.library_uuid == MAIN_UUID


def test_get_strings_shared_cache():
    entry = FirehoseNonActivity(firehose_formatters=FirehoseFormatters(shared_cache=True))
    message = entry.get_strings(_provider(), 100, 45, 188, _catalog())
    assert message.format_string == "%@ start"
    assert message.library == LIB_PATH
    assert message.library_uuid == LIB_UUID
    assert message.process == PROCESS_PATH
    assert message.process_uuid == MAIN_UUID


def test_get_strings_large_shared_cache_without_large_offset_requirement():
    formatters = FirehoseFormatters(has_large_offset=2, large_shared_cache=4)
    entry = FirehoseNonActivity(firehose_formatters=formatters)
    provider = _provider(range_offset=0x200000000)
    message = entry.get_strings(provider, 9, 45, 188, _catalog())
    assert message.format_string == "other"
    assert message.library == LIB_PATH