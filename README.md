# unifiedlog

Pure-Python parsers for binary structures found in macOS Unified Log
(`tracev3`) data: the log Catalog, and the Firehose activity, non-activity,
signpost and loss entries. The package also resolves a firehose entry's base
format string (for example `"%s start"`), together with the process and
library image paths, from UUIDText and shared-cache (dsc) string data that
you supply.

It has no runtime dependencies.

## Installing

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Conventions

Every parse function takes `bytes` and returns a tuple of the parsed value
and the bytes left over. Truncated or malformed input raises
`unifiedlog.binary.ParseError` (a `ValueError`). The low-level
`unifiedlog.binary.ByteReader` reads little-endian `u8`/`u16`/`u32`/`u64`
values and big-endian integers of any width with `be_uint(size)`.

## Parsing a Catalog

```python
from unifiedlog.catalog import parse_catalog

catalog, rest = parse_catalog(raw_catalog_bytes)

print(catalog.catalog_uuids)          # 32-digit upper-case hex strings
print(catalog.get_pid(158, 311))      # 0 if the process is not recorded
print(catalog.get_euid(158, 311))
info = catalog.get_subsystem(87, 158, 311)
print(info.subsystem, info.category)  # "Unknown subsystem" if not found
```

Process entries are kept in `catalog.catalog_process_info_entries`, a dict
keyed by `(first_proc_id, second_proc_id)`; `catalog.process_entry(first,
second)` returns one or `None`. Subchunks are in `catalog.catalog_subchunks`;
a subchunk whose compression algorithm is not LZ4 (`0x100`) raises
`ParseError`. The individual record parsers (`parse_process_entry`,
`parse_process_uuid_entry`, `parse_process_subsystem`,
`parse_catalog_subchunk`) live in `unifiedlog.records`.

## Parsing Firehose entries

```python
from unifiedlog.activity import parse_activity
from unifiedlog.nonactivity import parse_non_activity
from unifiedlog.signpost import parse_signpost
from unifiedlog.loss import parse_firehose_loss
from unifiedlog.flags import parse_formatter_flags

activity, rest = parse_activity(data, firehose_flags, log_type)
entry, rest = parse_non_activity(data, firehose_flags)
signpost, rest = parse_signpost(data, firehose_flags)
loss, rest = parse_firehose_loss(data)
formatters, rest = parse_formatter_flags(data, firehose_flags)
```

`parse_formatter_flags` recognises the main_exe, shared_cache,
large_shared_cache, absolute and uuid_relative formatter kinds; any other
combination of the formatter bits raises `ParseError`.

## Resolving format strings

String lookups go through a `unifiedlog.provider.FileProvider`, an abstract
class with `cached_uuidtext`, `cached_dsc`, `update_uuid` and `update_dsc`.
`MemoryProvider` is a ready implementation: files added with `add_uuidtext`
and `add_dsc` are moved into its cache when an update asks for them.

```python
from unifiedlog.provider import MemoryProvider, UUIDText, UUIDTextEntry

uuidtext = UUIDText(
    entry_descriptors=[UUIDTextEntry(range_start_offset=0, entry_size=12)],
    footer_data=b"%s started\x00\x00/usr/bin/tool\x00",
)

provider = MemoryProvider()
provider.add_uuidtext(main_uuid, uuidtext)
# provider.add_dsc(dsc_uuid, shared_strings)  # a SharedCacheStrings

message = entry.get_strings(provider, string_offset, first_proc_id, second_proc_id, catalog)
print(message.format_string, message.process, message.library)
```

`FirehoseActivity`, `FirehoseNonActivity` and `FirehoseSignpost` all have
`get_strings`; each calls `unifiedlog.resolve.get_strings_from_formatters`,
which picks one of:

- `unifiedlog.shared.extract_shared_strings` (shared cache strings),
- `unifiedlog.absolute.extract_absolute_strings` (absolute flag),
- `unifiedlog.resolve.extract_alt_uuid_strings` (UUID named in the entry),
- `unifiedlog.formats.extract_format_strings` (main executable's UUIDText).

Each returns a `MessageData` with `format_string`, `process`,
`process_uuid`, `library` and `library_uuid`. An offset with bit
`0x80000000` set resolves to `"%s"`. Where the offset matches no range, or
the UUIDText or shared-cache file is not available, `format_string` holds a
descriptive error text (such as `"Error: Invalid offset 1 for UUID ..."`)
instead of raising; string data that is itself truncated still raises
`ParseError`.

## What this package does not do

It parses individual Catalog and Firehose structures that you have already
extracted. It does not read `tracev3` files or iterate over their chunks,
decompress chunksets, parse UUIDText or shared-cache files from disk, apply
timesync data, format final log messages, or provide a command-line tool or
output writers. UUIDText and shared-cache contents must be supplied to a
provider as the dataclasses in `unifiedlog.provider`.