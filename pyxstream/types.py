# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Type definitions for decoded stream, group and consumer information.

All types are frozen dataclasses built once from a single reply. Fields
that the server may omit are ``None`` when absent.

Two fields are tagged unions resolved from the reply's runtime shape:

    GroupsSummary = GroupsCount | GroupsDetail
    EntriesView   = SimpleEntries | FullEntries
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union


class InfoKind(str, Enum):
    """XINFO sub-commands."""

    STREAM = "STREAM"
    GROUPS = "GROUPS"
    CONSUMERS = "CONSUMERS"


@dataclass(frozen=True)
class RawRecord:
    """A stream entry: its id and its field/value body."""

    msg_id: str
    body: dict[str, bytes]

    def decode(self, encoding: str = "utf-8") -> dict[str, str]:
        """Decode all body values as strings."""
        return {k: v.decode(encoding) for k, v in self.body.items()}


@dataclass(frozen=True)
class ConsumerDetail:
    """A consumer as reported by ``XINFO STREAM ... FULL``."""

    name: str
    seen_time: int  # milliseconds since epoch
    pel_count: int


@dataclass(frozen=True)
class GroupDetail:
    """A consumer group as reported by ``XINFO STREAM ... FULL``."""

    name: str
    last_delivered_id: str
    entries_read: int | None
    lag: int
    pel_count: int
    consumers: tuple[ConsumerDetail, ...]


@dataclass(frozen=True)
class GroupsCount:
    """Number of consumer groups, sent in place of the detailed list."""

    count: int


@dataclass(frozen=True)
class GroupsDetail:
    """Every consumer group of the stream with its consumers."""

    groups: tuple[GroupDetail, ...]

    def __len__(self) -> int:
        return len(self.groups)


GroupsSummary = Union[GroupsCount, GroupsDetail]


@dataclass(frozen=True)
class SimpleEntries:
    """First and last entry of the stream; None for an empty stream."""

    first: RawRecord | None
    last: RawRecord | None


@dataclass(frozen=True)
class FullEntries:
    """The stream entries returned by ``XINFO STREAM ... FULL``."""

    entries: tuple[RawRecord, ...]

    def __len__(self) -> int:
        return len(self.entries)


EntriesView = Union[SimpleEntries, FullEntries]


@dataclass(frozen=True)
class RadixTreeInfo:
    """Size of the radix tree backing the stream."""

    keys: int
    nodes: int


@dataclass(frozen=True)
class StreamInfo:
    """Result of ``XINFO STREAM``."""

    length: int
    last_generated_id: str
    max_deleted_entry_id: str | None
    recorded_first_entry_id: str | None
    entries_added: int
    groups: GroupsSummary
    radix_tree: RadixTreeInfo
    entries: EntriesView


@dataclass(frozen=True)
class GroupSummary:
    """One record of ``XINFO GROUPS``."""

    name: str
    consumers: int
    pending: int
    last_delivered_id: str
    lag: int
    entries_read: int | None = None


@dataclass(frozen=True)
class ConsumerSummary:
    """One record of ``XINFO CONSUMERS``."""

    name: str
    pending: int
    idle: int  # milliseconds since the last interaction
