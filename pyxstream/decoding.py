# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Typed extraction from generic RESP replies.

Replies that describe a record arrive as a flat array of alternating
keys and values. Decoding is a two step pipeline:

    1. ``flatten_map`` turns the array into a ``dict[str, Reply]``.
    2. ``FieldMap`` pulls each field out with a typed extractor, attaching
       the field name to any ``DecodeError`` raised on the way.

Extractors are plain functions ``(Reply) -> T`` that raise ``DecodeError``
on a shape mismatch, so they compose: ``to_list(value, decode_record)``.
"""

from __future__ import annotations

from typing import Callable, TypeVar

from .exceptions import DecodeError
from .protocol import Reply

T = TypeVar("T")

Extractor = Callable[[Reply], T]

ENCODING: str = "utf-8"


def to_int(value: Reply) -> int:
    """Extract an integer reply."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise DecodeError("integer", value)


def to_str(value: Reply) -> str:
    """Extract a status or bulk string reply as text."""
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        try:
            return value.decode(ENCODING)
        except UnicodeDecodeError:
            raise DecodeError(f"{ENCODING} string", value) from None
    raise DecodeError("string", value)


def to_bytes(value: Reply) -> bytes:
    """Extract a bulk or status string reply as raw bytes."""
    if isinstance(value, bytes):
        return value
    if isinstance(value, str):
        return value.encode(ENCODING)
    raise DecodeError("bytes", value)


def to_list(value: Reply, item: Extractor[T]) -> list[T]:
    """Extract an array reply, decoding every element with ``item``."""
    if not isinstance(value, list):
        raise DecodeError("array", value)
    result = []
    for index, element in enumerate(value):
        try:
            result.append(item(element))
        except DecodeError as e:
            raise e.with_field(str(index)) from None
    return result


def flatten_map(items: list[Reply]) -> dict[str, Reply]:
    """
    Turn an alternating key/value array into a mapping.

    Keys are decoded to text; values are left as generic replies. A
    repeated key overwrites the earlier value.

    Raises:
        DecodeError: If a key is not string-like or the array has odd length.
    """
    if len(items) % 2:
        raise DecodeError("an even number of items", items)
    result: dict[str, Reply] = {}
    for i in range(0, len(items), 2):
        result[to_str(items[i])] = items[i + 1]
    return result


def to_map(value: Reply, item: Extractor[T]) -> dict[str, T]:
    """Extract an alternating key/value array, decoding every value with ``item``."""
    if not isinstance(value, list):
        raise DecodeError("array", value)
    result = {}
    for key, element in flatten_map(value).items():
        try:
            result[key] = item(element)
        except DecodeError as e:
            raise e.with_field(key) from None
    return result


def optional_int(value: Reply) -> int | None:
    """Integer if the reply is an integer, otherwise None."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return None


def optional_str(value: Reply) -> str | None:
    """Text if the reply is string-like and decodable, otherwise None."""
    if isinstance(value, (str, bytes)):
        try:
            return to_str(value)
        except DecodeError:
            return None
    return None


class FieldMap:
    """
    Field-by-field view over a flattened record.

    Example:
        >>> fields = FieldMap.from_reply([b"name", b"g1", b"lag", 0])
        >>> fields.require("name", to_str)
        'g1'
        >>> fields.optional("entries-read", optional_int) is None
        True
    """

    def __init__(self, data: dict[str, Reply]) -> None:
        self._data = data

    @classmethod
    def from_reply(cls, value: Reply) -> FieldMap:
        """Flatten an array reply into a FieldMap."""
        if not isinstance(value, list):
            raise DecodeError("array", value)
        return cls(flatten_map(value))

    def __contains__(self, name: str) -> bool:
        return name in self._data

    def keys(self) -> list[str]:
        return list(self._data)

    def require(self, name: str, extractor: Extractor[T]) -> T:
        """Extract a field that must be present."""
        if name not in self._data:
            raise DecodeError("field to be present", None, field=name)
        return self._extract(name, extractor)

    def optional(self, name: str, extractor: Extractor[T]) -> T | None:
        """Extract a field, or return None when it is absent."""
        if name not in self._data:
            return None
        return self._extract(name, extractor)

    def _extract(self, name: str, extractor: Extractor[T]) -> T:
        try:
            return extractor(self._data[name])
        except DecodeError as e:
            raise e.with_field(name) from None
