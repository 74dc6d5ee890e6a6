import pytest

from unifiedlog.activity import FirehoseActivity, parse_activity
from unifiedlog.binary import ParseError
from unifiedlog.catalog import CatalogChunk
from unifiedlog.flags import FirehoseFormatters
from unifiedlog.provider import MemoryProvider, UUIDText, UUIDTextEntry
from unifiedlog.records import ProcessInfoEntry

TEST_DATA = bytes(
    [
        178, 251, 0, 0, 0, 0, 0, 128, 236, 0, 0, 0, 0, 0, 0, 0, 178, 251, 0, 0, 0, 0, 0, 128,
        179, 251, 0, 0, 0, 0, 0, 128, 64, 63, 24, 18, 1, 0, 2, 0,
    ]
)
TEST_FLAGS = 573

FIRST = 165
SECOND = 406
MAIN_UUID = "B736DF1625F538248E9527A8CEC4991E"
PROCESS_PATH = "/usr/libexec/opendirectoryd"
FORMAT = "Internal: Check the state of a node"


def _catalog():
    entry = ProcessInfoEntry(
        first_number_proc_id=FIRST, second_number_proc_id=SECOND, main_uuid=MAIN_UUID
    )
    return CatalogChunk(catalog_process_info_entries={(FIRST, SECOND): entry})


def _provider():
    blob = b"first\x00" + FORMAT.encode() + b"\x00"
    provider = MemoryProvider()
    provider.add_uuidtext(
        MAIN_UUID,
        UUIDText(
            entry_descriptors=[UUIDTextEntry(range_start_offset=0, entry_size=len(blob))],
            footer_data=blob + PROCESS_PATH.encode() + b"\x00",
        ),
    )
    return provider


def test_parse_activity():
    results, rest = parse_activity(TEST_DATA, TEST_FLAGS, 0x1)
    assert results.unknown_activity_id == 64434
    assert results.unknown_sentinel == 2147483648
    assert results.pid == 236
    assert results.unknown_activity_id_2 == 64434
    assert results.unknown_sentinel_2 == 2147483648
    assert results.unknown_activity_id_3 == 64435
    assert results.unknown_sentinel_3 == 2147483648
    assert results.unknown_message_string_ref == 0
    assert not results.firehose_formatters.main_exe
    assert not results.firehose_formatters.absolute
    assert not results.firehose_formatters.shared_cache
    assert not results.firehose_formatters.main_plugin
    assert not results.firehose_formatters.pc_style
    assert results.firehose_formatters.main_exe_alt_index == 0
    assert results.firehose_formatters.uuid_relative == ""
    assert results.unknown_pc_id == 303578944
    assert results.firehose_formatters.has_large_offset == 1
    assert results.firehose_formatters.large_shared_cache == 2
    assert rest == b""


def test_parse_useraction_skips_first_activity_id():
    results, rest = parse_activity(TEST_DATA[8:], TEST_FLAGS, 0x3)
    assert results.unknown_activity_id == 0
    assert results.unknown_sentinel == 0
    assert results.pid == 236
    assert results.unknown_activity_id_3 == 64435
    assert results.unknown_pc_id == 303578944
    assert rest == b""


def test_parse_activity_truncated():
    with pytest.raises(ParseError):
        parse_activity(TEST_DATA[:20], TEST_FLAGS, 0x1)


def test_get_strings_main_exe():
    activity = FirehoseActivity(firehose_formatters=FirehoseFormatters(main_exe=True))
    result = activity.get_strings(_provider(), len(b"first\x00"), FIRST, SECOND, _catalog())
    assert result.format_string == FORMAT
    assert result.library == PROCESS_PATH
    assert result.process == PROCESS_PATH
    assert result.process_uuid == MAIN_UUID
    assert result.library_uuid == MAIN_UUID


def test_get_strings_large_shared_cache_needs_large_offset():
    # Without has_large_offset an activity entry falls back to the UUIDText file.
    activity = FirehoseActivity(firehose_formatters=FirehoseFormatters(large_shared_cache=2))
    result = activity.get_strings(_provider(), len(b"first\x00"), FIRST, SECOND, _catalog())
    assert result.format_string == FORMAT
    assert result.library == PROCESS_PATH


def test_get_strings_dynamic_offset():
    activity = FirehoseActivity(firehose_formatters=FirehoseFormatters(main_exe=True))
    result = activity.get_strings(_provider(), 0x80000000, FIRST, SECOND, _catalog())
    assert result.format_string == "%s"
    assert result.process == PROCESS_PATH