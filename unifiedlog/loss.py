"""Firehose loss entries: records of dropped log messages."""

from __future__ import annotations

from dataclasses import dataclass

from .binary import ByteReader


@dataclass
class FirehoseLoss:
    """Time range and number of lost log entries."""

    start_time: int = 0
    end_time: int = 0
    count: int = 0


def parse_firehose_loss(data: bytes) -> tuple[FirehoseLoss, bytes]:
    """Parse a loss entry; return it and the remaining bytes."""
    reader = ByteReader(data)
    loss = FirehoseLoss(start_time=reader.u64(), end_time=reader.u64(), count=reader.u64())
    return loss, reader.remaining()