# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Custom exceptions for the PyXStream SDK.

All exceptions inherit from XStreamError, so every PyXStream failure can be
caught with a single except clause:

    try:
        client.xgroup_create("orders", "g1", mkstream=True)
    except XStreamError as e:
        print(f"XStream error: {e}")

For more granular error handling, catch specific exception types:

    try:
        command = XGroup("orders", "g1").destroy().make_stream().build()
    except CommandBuildError as e:
        print(f"Invalid command: {e.reason}")

    try:
        client.execute(command)
    except GroupAlreadyExistsError:
        pass
    except DecodeError as e:
        print(f"Unexpected reply at {e.field}: {e.value!r}")
"""

from __future__ import annotations

from typing import Any


class XStreamError(Exception):
    """
    Base exception for all PyXStream errors.

    All PyXStream exceptions inherit from this class, allowing you to catch
    all of them with a single except clause.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.hint = hint
        if hint:
            message = f"{message}\n\n  Hint: {hint}"
        super().__init__(message)


class DecodeError(XStreamError):
    """
    Raised when a reply does not have the shape a field requires.

    Carries the expected kind, the offending value and, when known, the
    dotted path of the field being decoded (``groups.0.lag``).
    """

    def __init__(self, expected: str, value: Any, *, field: str | None = None) -> None:
        self.expected = expected
        self.value = value
        self.field = field
        message = f"expected {expected}, got {value!r}"
        if field:
            message = f"{field}: {message}"
        super().__init__(message)

    def with_field(self, name: str) -> DecodeError:
        """Return a copy of this error with ``name`` prefixed to the field path."""
        field = f"{name}.{self.field}" if self.field else name
        return DecodeError(self.expected, self.value, field=field)


class CommandBuildError(XStreamError):
    """
    Raised when a command builder is finalized in an invalid state.

    Raised before any frame exists, so nothing malformed is ever sent.
    """

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class ServerError(XStreamError):
    """
    Raised when the server answers with an error or an unexpected status.

    The server's message is kept verbatim in ``message``.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        self.message = message
        super().__init__(message, hint=hint)


class GroupAlreadyExistsError(ServerError):
    """Raised when creating a consumer group that already exists (BUSYGROUP)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            hint="Use XGroup(...).set_id() to move an existing group instead",
        )


class GroupNotFoundError(ServerError):
    """Raised when the key or the consumer group does not exist (NOGROUP)."""

    def __init__(self, message: str) -> None:
        super().__init__(
            message,
            hint="Create the group first: XGroup(key, group).create().make_stream()",
        )


class ConnectionError(XStreamError):
    """
    Raised when connection to the server fails.

    Common causes:
    - Server is not running
    - Wrong host or port
    - Network issues
    """

    def __init__(
        self,
        message: str,
        host: str | None = None,
        port: int | None = None,
        *,
        hint: str | None = None,
    ) -> None:
        self.host = host
        self.port = port
        if hint is None and host:
            hint = f"Check that the server is running on {host}:{port}"
        super().__init__(message, hint=hint)


class ConnectionClosedError(ConnectionError):
    """Raised when the connection is closed while a reply is expected."""

    def __init__(self, message: str = "Connection closed by server") -> None:
        super().__init__(message, hint="The server may have been restarted. Try reconnecting.")


class ConnectionTimeoutError(ConnectionError):
    """Raised when connecting or waiting for a reply times out."""

    def __init__(self, message: str, host: str | None = None, port: int | None = None) -> None:
        super().__init__(
            message,
            host,
            port,
            hint="Try increasing connect_timeout_ms or socket_timeout_ms",
        )


class AuthenticationError(XStreamError):
    """Raised when the server rejects the configured credentials."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(
            message,
            hint="Check the username and password passed to connect()",
        )


def raise_for_error(message: str) -> None:
    """Raise the ServerError subclass matching a server error message."""
    code = message.split(" ", 1)[0]
    if code == "BUSYGROUP":
        raise GroupAlreadyExistsError(message)
    if code == "NOGROUP":
        raise GroupNotFoundError(message)
    if code in ("WRONGPASS", "NOAUTH"):
        raise AuthenticationError(message)
    raise ServerError(message)
