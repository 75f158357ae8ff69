# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
RESP2 reply model and wire codec.

Replies are represented with plain Python values:

    +-----------+---------------------+---------------------------+
    | Prefix    | RESP type           | Python value              |
    +-----------+---------------------+---------------------------+
    | ``+``     | Simple string       | ``str``                   |
    | ``-``     | Error               | ``ReplyError``            |
    | ``:``     | Integer             | ``int``                   |
    | ``$``     | Bulk string         | ``bytes`` (``None`` nil)  |
    | ``*``     | Array               | ``list`` (``None`` nil)   |
    +-----------+---------------------+---------------------------+

Outgoing commands (frames) are lists of byte-string tokens, encoded as a
RESP array of bulk strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from typing import BinaryIO

# Protocol constants
CRLF: bytes = b"\r\n"
MAX_BULK_SIZE: int = 512 * 1024 * 1024  # 512MB


@dataclass(frozen=True)
class ReplyError:
    """An error reply (``-ERR ...``) returned by the server."""

    message: str

    @property
    def code(self) -> str:
        """Leading error code, e.g. ``BUSYGROUP`` or ``ERR``."""
        return self.message.split(" ", 1)[0]


Reply = Union[int, bytes, str, list, ReplyError, None]
Frame = list[bytes]


class ProtocolError(Exception):
    """Base exception for protocol errors."""


class InvalidReplyError(ProtocolError):
    """Raised when the byte stream is not valid RESP."""


class ReplyTooLargeError(ProtocolError):
    """Raised when a bulk string exceeds the maximum size."""

    def __init__(self, size: int) -> None:
        super().__init__(
            f"Bulk string too large: {size} bytes, maximum is {MAX_BULK_SIZE} bytes"
        )
        self.size = size


def encode_token(token: bytes | str | int) -> bytes:
    """Coerce a single command token to bytes."""
    if isinstance(token, bytes):
        return token
    if isinstance(token, bool):
        raise TypeError(f"Cannot encode bool as a command token: {token!r}")
    if isinstance(token, int):
        return str(token).encode("ascii")
    return token.encode("utf-8")


def encode_command(frame: list[bytes | str | int]) -> bytes:
    """
    Encode a command frame as a RESP array of bulk strings.

    Format:
        *<n>\\r\\n  then for each token  $<len>\\r\\n<token>\\r\\n
    """
    parts = [b"*%d\r\n" % len(frame)]
    for token in frame:
        data = encode_token(token)
        parts.append(b"$%d\r\n" % len(data))
        parts.append(data)
        parts.append(CRLF)
    return b"".join(parts)


def write_command(writer: BinaryIO, frame: list[bytes | str | int]) -> None:
    """
    Write an encoded command frame to a binary stream.

    Args:
        writer: Binary stream to write to.
        frame: Ordered command tokens.
    """
    writer.write(encode_command(frame))


def _read_line(reader: BinaryIO) -> bytes:
    line = reader.readline()
    if not line:
        raise EOFError("Connection closed")
    if not line.endswith(CRLF):
        raise EOFError(f"Incomplete line: {line!r}")
    return line[:-2]


def _parse_length(data: bytes) -> int:
    try:
        return int(data)
    except ValueError:
        raise InvalidReplyError(f"Invalid length: {data!r}") from None


def read_reply(reader: BinaryIO) -> Reply:
    """
    Read one complete reply from a binary stream.

    Args:
        reader: Binary stream to read from (needs ``read`` and ``readline``).

    Returns:
        The reply as a plain Python value (see module docstring).

    Raises:
        InvalidReplyError: If the stream is not valid RESP.
        ReplyTooLargeError: If a bulk string exceeds MAX_BULK_SIZE.
        EOFError: If the stream ends unexpectedly.
    """
    line = _read_line(reader)
    if not line:
        raise InvalidReplyError("Empty reply line")

    prefix, rest = line[:1], line[1:]

    if prefix == b"+":
        return rest.decode("utf-8", errors="replace")

    if prefix == b"-":
        return ReplyError(rest.decode("utf-8", errors="replace"))

    if prefix == b":":
        return _parse_length(rest)

    if prefix == b"$":
        length = _parse_length(rest)
        if length == -1:
            return None
        if length < 0:
            raise InvalidReplyError(f"Invalid bulk length: {length}")
        if length > MAX_BULK_SIZE:
            raise ReplyTooLargeError(length)
        data = reader.read(length + 2)
        if len(data) < length + 2:
            raise EOFError(
                f"Incomplete bulk string: got {len(data)} bytes, expected {length + 2}"
            )
        if data[-2:] != CRLF:
            raise InvalidReplyError("Bulk string not terminated by CRLF")
        return data[:-2]

    if prefix == b"*":
        count = _parse_length(rest)
        if count == -1:
            return None
        if count < 0:
            raise InvalidReplyError(f"Invalid array length: {count}")
        return [read_reply(reader) for _ in range(count)]

    raise InvalidReplyError(f"Unknown reply type: {prefix!r}")
