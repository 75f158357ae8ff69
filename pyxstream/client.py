# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
PyXStream Client.

A small synchronous client that executes PyXStream commands over a single
RESP connection. Commands frame themselves and decode their own replies;
the client only moves bytes and maps error replies to exceptions.

Usage Patterns:

    # Pattern 1: Convenience methods
    from pyxstream import connect
    client = connect("localhost:6379")
    client.xgroup_create("orders", "g1", mkstream=True)
    info = client.xinfo_stream("orders")

    # Pattern 2: Context manager with explicit commands
    from pyxstream import StreamClient, XGroup, XInfo, XInfoType
    with StreamClient("localhost:6379") as client:
        client.execute(XGroup("orders", "g1").create().make_stream().build())
        groups = client.execute(XInfo("orders", XInfoType.groups()))
    # Connection auto-closes when exiting the block
"""

from __future__ import annotations

import logging
import socket
import threading
from typing import Any

from .command import Command
from .exceptions import (
    AuthenticationError,
    ConnectionClosedError,
    ConnectionError,
    ConnectionTimeoutError,
    raise_for_error,
)
from .models import ClientConfig
from .protocol import ProtocolError, Reply, ReplyError, read_reply, write_command
from .types import ConsumerSummary, GroupSummary, StreamInfo
from .xgroup import XGroup
from .xinfo import XInfo, XInfoType

logger = logging.getLogger(__name__)


class StreamClient:
    """
    Client for stream consumer group administration.

    The client connects lazily on first use and serialises requests with a
    lock, so one instance can be shared between threads.

    Example:
        >>> client = StreamClient("localhost:6379")
        >>> client.xgroup_create("orders", "g1", mkstream=True)
        >>> client.xinfo_groups("orders")
        [GroupSummary(name='g1', consumers=0, pending=0, ...)]
        >>> client.close()
    """

    def __init__(
        self,
        address: str | None = None,
        *,
        config: ClientConfig | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Initialize the client.

        Args:
            address: Server address as host:port (default: localhost:6379).
            config: Optional ClientConfig object.
            **kwargs: Override config options (socket_timeout_ms, password, etc.)
        """
        if address is not None:
            kwargs["address"] = address
        if config is None:
            config = ClientConfig(**kwargs)
        else:
            for key, value in kwargs.items():
                if hasattr(config, key):
                    setattr(config, key, value)

        self._config = config
        self._sock: socket.socket | None = None
        self._file: Any = None
        self._lock = threading.RLock()
        self._closed = False

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def connected(self) -> bool:
        return self._sock is not None

    def _connect(self) -> None:
        """Open the socket and run the connection handshake."""
        host, port = self._config.get_host_port()
        try:
            sock = socket.create_connection(
                (host, port), timeout=self._config.connect_timeout_ms / 1000.0
            )
        except socket.timeout as e:
            raise ConnectionTimeoutError(f"Connection to {host}:{port} timed out", host, port) from e
        except OSError as e:
            raise ConnectionError(f"Failed to connect to {host}:{port}: {e}", host, port) from e

        sock.settimeout(self._config.socket_timeout_ms / 1000.0)
        self._sock = sock
        self._file = sock.makefile("rwb")
        logger.debug("Connected to %s:%d", host, port)

        try:
            self._handshake()
        except Exception:
            self._drop()
            raise

    def _handshake(self) -> None:
        config = self._config
        if config.password is not None:
            frame = [b"AUTH"]
            if config.username is not None:
                frame.append(config.username.encode())
            frame.append(config.password.encode())
            reply = self._roundtrip(frame)
            if isinstance(reply, ReplyError):
                raise AuthenticationError(reply.message)
        if config.client_name is not None:
            self._call([b"CLIENT", b"SETNAME", config.client_name.encode()])
        if config.db:
            self._call([b"SELECT", str(config.db).encode()])

    def _ensure_connected(self) -> None:
        if self._closed:
            raise ConnectionClosedError("Client is closed")
        if self._sock is None:
            self._connect()

    def _drop(self) -> None:
        """Forget the current connection after an I/O failure."""
        file, sock = self._file, self._sock
        self._file = None
        self._sock = None
        for resource in (file, sock):
            if resource is not None:
                try:
                    resource.close()
                except OSError:
                    pass

    def _roundtrip(self, frame: list[bytes]) -> Reply:
        """
        Send one frame and read one reply.

        Raises:
            ConnectionError: If the connection fails.
            ProtocolError: If the reply is not valid RESP.
        """
        with self._lock:
            self._ensure_connected()
            try:
                write_command(self._file, frame)
                self._file.flush()
                return read_reply(self._file)
            except EOFError as e:
                self._drop()
                raise ConnectionClosedError(str(e)) from e
            except socket.timeout as e:
                self._drop()
                raise ConnectionTimeoutError(f"Timed out waiting for {frame[0].decode()} reply") from e
            except OSError as e:
                self._drop()
                raise ConnectionError(str(e)) from e
            except ProtocolError:
                # The rest of the broken reply is still buffered
                self._drop()
                raise

    def _call(self, frame: list[bytes]) -> Reply:
        reply = self._roundtrip(frame)
        if isinstance(reply, ReplyError):
            logger.warning("%s failed: %s", frame[0].decode(), reply.message)
            raise_for_error(reply.message)
        return reply

    def execute(self, command: Command) -> Any:
        """
        Execute a command and return its decoded result.

        Args:
            command: Any Command, e.g. ``XInfo(...)`` or ``XGroup(...).build()``.

        Raises:
            ServerError: If the server answers with an error.
            DecodeError: If the reply does not have the expected shape.
            ConnectionError: If the connection fails.
            ProtocolError: If the reply is not valid RESP.
        """
        frame = command.to_request()
        logger.debug("Executing %s", b" ".join(frame[:2]).decode(errors="replace"))
        return command.to_output(self._call(frame))

    def close(self) -> None:
        """Close the client connection."""
        with self._lock:
            self._closed = True
            if self._sock is not None:
                self._drop()
                logger.debug("Closed connection to %s", self._config.address)

    def __enter__(self) -> StreamClient:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    # =========================================================================
    # XINFO
    # =========================================================================

    def xinfo_stream(
        self, key: str, *, full: bool = False, count: int | None = None
    ) -> StreamInfo:
        """
        Get information about a stream.

        Args:
            key: Stream key.
            full: Request the detailed view with groups, consumers and entries.
            count: Limit entries and PEL items in the detailed view.
        """
        command = XInfo(key, XInfoType.stream(count))
        if full:
            command = command.full()
        return self.execute(command)

    def xinfo_groups(self, key: str) -> list[GroupSummary]:
        """List the consumer groups of a stream."""
        return self.execute(XInfo(key, XInfoType.groups()))

    def xinfo_consumers(self, key: str, group: str) -> list[ConsumerSummary]:
        """List the consumers of a consumer group."""
        return self.execute(XInfo(key, XInfoType.consumers(group)))

    # =========================================================================
    # XGROUP
    # =========================================================================

    def xgroup_create(
        self,
        key: str,
        group: str,
        id: str | None = None,
        *,
        mkstream: bool = False,
        entries_read: bool = False,
    ) -> None:
        """
        Create a consumer group.

        Args:
            key: Stream key.
            group: Group name.
            id: Last delivered id for the group (``$`` by default).
            mkstream: Create the stream if it does not exist.
            entries_read: Send the ENTRIESREAD flag.

        Raises:
            GroupAlreadyExistsError: If the group already exists.
        """
        builder = XGroup(key, group).create()
        if id is not None:
            builder = builder.id(id)
        if mkstream:
            builder = builder.make_stream()
        if entries_read:
            builder = builder.entries_read()
        self.execute(builder.build())

    def xgroup_setid(
        self, key: str, group: str, id: str | None = None, *, entries_read: bool = False
    ) -> None:
        """Move the last delivered id of a consumer group."""
        builder = XGroup(key, group).set_id()
        if id is not None:
            builder = builder.id(id)
        if entries_read:
            builder = builder.entries_read()
        self.execute(builder.build())

    def xgroup_destroy(self, key: str, group: str) -> None:
        """Destroy a consumer group."""
        self.execute(XGroup(key, group).destroy().build())

    def xgroup_createconsumer(self, key: str, group: str, consumer: str) -> None:
        """Create a consumer in a consumer group."""
        self.execute(XGroup(key, group).create_consumer(consumer).build())

    def xgroup_delconsumer(self, key: str, group: str, consumer: str) -> None:
        """Delete a consumer from a consumer group."""
        self.execute(XGroup(key, group).delete_consumer(consumer).build())


def connect(address: str | None = None, **kwargs: Any) -> StreamClient:
    """
    Create a StreamClient.

    Example:
        >>> client = connect("localhost:6379", password="secret")
        >>> client.xinfo_groups("orders")
    """
    return StreamClient(address, **kwargs)
