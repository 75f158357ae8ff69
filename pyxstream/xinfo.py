# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
XINFO command and reply decoders.

Usage:
    >>> cmd = XInfo("orders", XInfoType.stream()).full()
    >>> cmd.to_request()
    [b'XINFO', b'STREAM', b'orders', b'FULL']
    >>> info = cmd.to_output(reply)  # StreamInfo

The same logical field can come back in different shapes depending on the
query options and server version, so the decoders resolve variants from
the reply's runtime shape rather than from the flags that were sent:

    groups   Integer -> GroupsCount        Array -> GroupsDetail
    entries  "entries" key -> FullEntries  "first-entry"/"last-entry" -> SimpleEntries
    reply    first item string -> StreamInfo   first item array -> record list
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import ClassVar, Union

from .command import Command
from .decoding import (
    FieldMap,
    optional_int,
    optional_str,
    to_bytes,
    to_int,
    to_list,
    to_map,
    to_str,
)
from .exceptions import DecodeError
from .protocol import Reply
from .types import (
    ConsumerDetail,
    ConsumerSummary,
    EntriesView,
    FullEntries,
    GroupDetail,
    GroupsCount,
    GroupsDetail,
    GroupsSummary,
    GroupSummary,
    InfoKind,
    RadixTreeInfo,
    RawRecord,
    SimpleEntries,
    StreamInfo,
)

InfoResult = Union[StreamInfo, list[GroupSummary], list[ConsumerSummary]]


def _to_unsigned(value: Reply) -> int:
    number = to_int(value)
    if number < 0:
        raise DecodeError("non-negative integer", value)
    return number


# =============================================================================
# Record decoders
# =============================================================================


def decode_raw_record(value: Reply) -> RawRecord:
    """Decode ``[id, [field, value, ...]]`` into a RawRecord."""
    if not isinstance(value, list) or len(value) != 2:
        raise DecodeError("array of [id, fields]", value)
    msg_id = to_str(value[0])
    try:
        body = to_map(value[1], to_bytes)
    except DecodeError as e:
        raise e.with_field(msg_id) from None
    return RawRecord(msg_id=msg_id, body=body)


def _decode_optional_record(value: Reply) -> RawRecord | None:
    if value is None:
        return None
    return decode_raw_record(value)


def decode_consumer_detail(value: Reply) -> ConsumerDetail:
    fields = FieldMap.from_reply(value)
    return ConsumerDetail(
        name=fields.require("name", to_str),
        seen_time=fields.require("seen-time", to_int),
        pel_count=fields.require("pel-count", to_int),
    )


def decode_group_detail(value: Reply) -> GroupDetail:
    fields = FieldMap.from_reply(value)
    return GroupDetail(
        name=fields.require("name", to_str),
        last_delivered_id=fields.require("last-delivered-id", to_str),
        entries_read=fields.optional("entries-read", optional_int),
        lag=fields.require("lag", to_int),
        pel_count=fields.require("pel-count", to_int),
        consumers=tuple(
            fields.require("consumers", lambda v: to_list(v, decode_consumer_detail))
        ),
    )


def decode_group_summary(value: Reply) -> GroupSummary:
    fields = FieldMap.from_reply(value)
    return GroupSummary(
        name=fields.require("name", to_str),
        consumers=fields.require("consumers", to_int),
        pending=fields.require("pending", to_int),
        last_delivered_id=fields.require("last-delivered-id", to_str),
        lag=fields.require("lag", to_int),
        entries_read=fields.optional("entries-read", optional_int),
    )


def decode_consumer_summary(value: Reply) -> ConsumerSummary:
    fields = FieldMap.from_reply(value)
    return ConsumerSummary(
        name=fields.require("name", to_str),
        pending=fields.require("pending", _to_unsigned),
        idle=fields.require("idle", _to_unsigned),
    )


# =============================================================================
# Variant resolvers
# =============================================================================


def resolve_groups(value: Reply) -> GroupsSummary:
    """
    Resolve the ``groups`` field of a stream.

    An integer is the plain group count; an array holds one detailed
    record per group (``XINFO STREAM ... FULL``).
    """
    if isinstance(value, int) and not isinstance(value, bool):
        return GroupsCount(value)
    if isinstance(value, list):
        return GroupsDetail(tuple(to_list(value, decode_group_detail)))
    raise DecodeError("integer or array", value)


def resolve_entries(fields: FieldMap) -> EntriesView:
    """
    Resolve the entries view of a stream.

    ``entries`` holds the full entry list; otherwise ``first-entry`` and
    ``last-entry`` must both be present.
    """
    if "entries" in fields:
        return FullEntries(
            tuple(fields.require("entries", lambda v: to_list(v, decode_raw_record)))
        )
    if "first-entry" not in fields and "last-entry" not in fields:
        raise DecodeError("'entries' or 'first-entry'/'last-entry' fields", fields.keys())
    return SimpleEntries(
        first=fields.require("first-entry", _decode_optional_record),
        last=fields.require("last-entry", _decode_optional_record),
    )


def decode_stream_info(items: list[Reply]) -> StreamInfo:
    """Decode the flattened key/value reply of ``XINFO STREAM``."""
    fields = FieldMap.from_reply(items)
    length = fields.require("length", to_int)
    last_generated_id = fields.require("last-generated-id", to_str)
    max_deleted_entry_id = fields.optional("max-deleted-entry-id", optional_str)
    recorded_first_entry_id = fields.optional("recorded-first-entry-id", optional_str)
    entries_added = fields.require("entries-added", to_int)
    groups = fields.require("groups", resolve_groups)
    entries = resolve_entries(fields)
    radix_tree = RadixTreeInfo(
        keys=fields.require("radix-tree-keys", to_int),
        nodes=fields.require("radix-tree-nodes", to_int),
    )
    return StreamInfo(
        length=length,
        last_generated_id=last_generated_id,
        max_deleted_entry_id=max_deleted_entry_id,
        recorded_first_entry_id=recorded_first_entry_id,
        entries_added=entries_added,
        groups=groups,
        radix_tree=radix_tree,
        entries=entries,
    )


def resolve_info_reply(items: list[Reply], kind: InfoKind = InfoKind.STREAM) -> InfoResult:
    """
    Dispatch an XINFO array reply on the shape of its first element.

    A string-like first element means the array is a flattened stream
    record. An array first element means the reply is a list of records:
    consumers for ``InfoKind.CONSUMERS``, groups otherwise.
    """
    if not items:
        raise DecodeError("non-empty array", items)
    first = items[0]
    if isinstance(first, (bytes, str)):
        return decode_stream_info(items)
    if isinstance(first, list):
        if kind is InfoKind.CONSUMERS:
            return to_list(items, decode_consumer_summary)
        return to_list(items, decode_group_summary)
    raise DecodeError("string or array as first element", first)


# =============================================================================
# Command
# =============================================================================


@dataclass(frozen=True)
class XInfoType:
    """
    Which XINFO query to run.

    Build one with the constructors:
        XInfoType.stream(count=None)
        XInfoType.groups()
        XInfoType.consumers(group)
    """

    kind: InfoKind
    count: int | None = None
    group: str | None = None

    @classmethod
    def stream(cls, count: int | None = None) -> XInfoType:
        return cls(InfoKind.STREAM, count=count)

    @classmethod
    def groups(cls) -> XInfoType:
        return cls(InfoKind.GROUPS)

    @classmethod
    def consumers(cls, group: str) -> XInfoType:
        return cls(InfoKind.CONSUMERS, group=group)


@dataclass(frozen=True)
class XInfo(Command):
    """
    ``XINFO STREAM|GROUPS|CONSUMERS`` query.

    ``full()`` only affects STREAM queries and is ignored otherwise.
    """

    name: ClassVar[str] = "XINFO"

    key: str
    info_type: XInfoType
    is_full: bool = False

    def full(self) -> XInfo:
        """Request the detailed stream view (``FULL``)."""
        return replace(self, is_full=True)

    def to_request(self) -> list[bytes]:
        info = self.info_type
        request = [b"XINFO", info.kind.value.encode(), self.key.encode()]
        if info.kind is InfoKind.STREAM:
            if self.is_full:
                request.append(b"FULL")
            if info.count is not None:
                request.append(str(info.count).encode())
        elif info.kind is InfoKind.CONSUMERS:
            request.append(info.group.encode())
        return request

    def to_output(self, reply: Reply) -> InfoResult:
        if not isinstance(reply, list):
            raise DecodeError("array", reply)
        kind = self.info_type.kind
        if kind is InfoKind.STREAM:
            return resolve_info_reply(reply, kind)
        if kind is InfoKind.CONSUMERS:
            return to_list(reply, decode_consumer_summary)
        return to_list(reply, decode_group_summary)
