# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
PyXStream - stream consumer group commands for RESP key-value stores.

Builds XINFO and XGROUP command frames and decodes their replies into
typed results:
- Immutable, validated XGROUP builder
- Typed StreamInfo / GroupSummary / ConsumerSummary results
- Shape-driven decoding of count-vs-detail and pair-vs-list fields
- Optional synchronous client over a RESP connection

Building Commands (no I/O):
    >>> from pyxstream import XGroup, XInfo, XInfoType
    >>>
    >>> cmd = XGroup("orders", "g1").create().make_stream().build()
    >>> cmd.to_request()
    [b'XGROUP', b'CREATE', b'orders', b'g1', b'$', b'MKSTREAM']
    >>> cmd.to_output("OK")  # None on success

Decoding Replies:
    >>> info = XInfo("orders", XInfoType.stream()).to_output(reply)
    >>> isinstance(info.groups, GroupsCount)
    True

Executing Commands:
    >>> from pyxstream import connect
    >>>
    >>> with connect("localhost:6379") as client:
    ...     client.xgroup_create("orders", "g1", mkstream=True)
    ...     for group in client.xinfo_groups("orders"):
    ...         print(group.name, group.lag)
"""

import logging

from .client import StreamClient, connect
from .command import Command
from .decoding import FieldMap, flatten_map
from .exceptions import (
    AuthenticationError,
    CommandBuildError,
    ConnectionClosedError,
    ConnectionError,
    ConnectionTimeoutError,
    DecodeError,
    GroupAlreadyExistsError,
    GroupNotFoundError,
    ServerError,
    XStreamError,
)
from .models import ClientConfig
from .protocol import ProtocolError, ReplyError
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
from .xgroup import XGroup, XGroupCommand
from .xinfo import XInfo, XInfoType

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"
__author__ = "Firefly Software Solutions Inc."
__license__ = "Apache-2.0"

__all__ = [
    # Client
    "StreamClient",
    "connect",
    "ClientConfig",
    # Commands
    "Command",
    "XGroup",
    "XGroupCommand",
    "XInfo",
    "XInfoType",
    "InfoKind",
    # Decoding
    "FieldMap",
    "flatten_map",
    "ReplyError",
    # Types
    "StreamInfo",
    "RadixTreeInfo",
    "GroupsSummary",
    "GroupsCount",
    "GroupsDetail",
    "GroupDetail",
    "ConsumerDetail",
    "EntriesView",
    "SimpleEntries",
    "FullEntries",
    "RawRecord",
    "GroupSummary",
    "ConsumerSummary",
    # Exceptions
    "XStreamError",
    "DecodeError",
    "CommandBuildError",
    "ServerError",
    "GroupAlreadyExistsError",
    "GroupNotFoundError",
    "ConnectionError",
    "ConnectionClosedError",
    "ConnectionTimeoutError",
    "AuthenticationError",
    "ProtocolError",
]
