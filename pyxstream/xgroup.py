# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
XGROUP command builder.

The XGROUP sub-commands share one request shell but accept different
options, so the builder tracks the selected sub-command as an explicit
state value and rejects options that the sub-command does not take:

    +----------------+------+-------------+------------+
    | Sub-command    | id   | entries_read| make_stream|
    +----------------+------+-------------+------------+
    | create         | yes  | yes         | yes        |
    | set_id         | yes  | yes         | no         |
    | destroy        | no   | no          | no         |
    | create_consumer| no   | no          | no         |
    | delete_consumer| no   | no          | no         |
    +----------------+------+-------------+------------+

Every builder method returns a new builder; ``build()`` validates the
final state and returns an immutable ``XGroupCommand``.

Example:
    >>> XGroup("orders", "g1").create().make_stream().build().to_request()
    [b'XGROUP', b'CREATE', b'orders', b'g1', b'$', b'MKSTREAM']
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import ClassVar, Union

from .command import Command
from .exceptions import CommandBuildError, DecodeError, raise_for_error
from .protocol import Reply

logger = logging.getLogger(__name__)

DEFAULT_ID: str = "$"

NOT_SET_REASON = "XGroup sub-command not set"
ID_REASON = "id only used in create or setid sub command"
ENTRIES_READ_REASON = "entriesread only used in create or setid sub command"
MKSTREAM_REASON = "mkstream only used in create sub command"


# =============================================================================
# Sub-command states
# =============================================================================


@dataclass(frozen=True)
class Unset:
    """No sub-command selected yet."""


@dataclass(frozen=True)
class Create:
    id: str | None = None
    mkstream: bool = False
    entries_read: bool = False


@dataclass(frozen=True)
class SetId:
    id: str | None = None
    entries_read: bool = False


@dataclass(frozen=True)
class Destroy:
    pass


@dataclass(frozen=True)
class CreateConsumer:
    consumer: str


@dataclass(frozen=True)
class DeleteConsumer:
    consumer: str


@dataclass(frozen=True)
class Invalid:
    """An option was applied to a sub-command that does not accept it."""

    reason: str


SubCommand = Union[Unset, Create, SetId, Destroy, CreateConsumer, DeleteConsumer, Invalid]


# =============================================================================
# Command
# =============================================================================


@dataclass(frozen=True)
class XGroupCommand(Command):
    """A validated XGROUP command holding its outgoing frame."""

    name: ClassVar[str] = "XGROUP"

    frame: tuple[bytes, ...]

    @property
    def sub_command(self) -> str:
        return self.frame[1].decode()

    def to_request(self) -> list[bytes]:
        return list(self.frame)

    def to_output(self, reply: Reply) -> None:
        """
        Decode the acknowledgement.

        An integer or ``OK`` means success. Any other status string is
        raised as a ServerError carrying the string.
        """
        if isinstance(reply, int) and not isinstance(reply, bool):
            return None
        if isinstance(reply, str):
            if reply == "OK":
                return None
            raise_for_error(reply)
        raise DecodeError("string or integer", reply)


def _assemble(key: str, group: str, state: SubCommand) -> tuple[bytes, ...]:
    request = [b"XGROUP", key.encode(), group.encode()]
    if isinstance(state, Create):
        request.insert(1, b"CREATE")
        request.append((DEFAULT_ID if state.id is None else state.id).encode())
        if state.mkstream:
            request.append(b"MKSTREAM")
        if state.entries_read:
            request.append(b"ENTRIESREAD")
    elif isinstance(state, SetId):
        request.insert(1, b"SETID")
        request.append((DEFAULT_ID if state.id is None else state.id).encode())
        if state.entries_read:
            request.append(b"ENTRIESREAD")
    elif isinstance(state, Destroy):
        request.insert(1, b"DESTROY")
    elif isinstance(state, CreateConsumer):
        request.insert(1, b"CREATECONSUMER")
        request.append(state.consumer.encode())
    elif isinstance(state, DeleteConsumer):
        request.insert(1, b"DELCONSUMER")
        request.append(state.consumer.encode())
    return tuple(request)


# =============================================================================
# Builder
# =============================================================================


@dataclass(frozen=True)
class XGroup:
    """
    Fluent, immutable builder for XGROUP commands.

    Selecting a sub-command discards options gathered so far. Applying an
    option the current sub-command does not take makes the builder invalid;
    the first reason is kept and reported by ``build()``.
    """

    key: str
    group: str
    state: SubCommand = field(default_factory=Unset)

    # Sub-command selectors

    def create(self) -> XGroup:
        return replace(self, state=Create())

    def set_id(self) -> XGroup:
        return replace(self, state=SetId())

    def destroy(self) -> XGroup:
        return replace(self, state=Destroy())

    def create_consumer(self, consumer: str) -> XGroup:
        return replace(self, state=CreateConsumer(consumer))

    def delete_consumer(self, consumer: str) -> XGroup:
        return replace(self, state=DeleteConsumer(consumer))

    # Options

    def id(self, id: str) -> XGroup:
        """Set the last delivered id (``$`` when never set)."""
        if isinstance(self.state, (Create, SetId)):
            return replace(self, state=replace(self.state, id=id))
        return self._invalidate(ID_REASON)

    def entries_read(self) -> XGroup:
        """Append ENTRIESREAD to CREATE or SETID."""
        if isinstance(self.state, (Create, SetId)):
            return replace(self, state=replace(self.state, entries_read=True))
        return self._invalidate(ENTRIES_READ_REASON)

    def make_stream(self) -> XGroup:
        """Create the stream if it does not exist (CREATE only)."""
        if isinstance(self.state, Create):
            return replace(self, state=replace(self.state, mkstream=True))
        return self._invalidate(MKSTREAM_REASON)

    def _invalidate(self, reason: str) -> XGroup:
        if isinstance(self.state, Invalid):
            return self
        return replace(self, state=Invalid(reason))

    def build(self) -> XGroupCommand:
        """
        Validate the builder and return the command.

        Raises:
            CommandBuildError: If no sub-command is selected or an option
                was applied to a sub-command that does not take it.
        """
        if isinstance(self.state, Unset):
            logger.debug("Rejected XGROUP %s %s: %s", self.key, self.group, NOT_SET_REASON)
            raise CommandBuildError(NOT_SET_REASON)
        if isinstance(self.state, Invalid):
            logger.debug("Rejected XGROUP %s %s: %s", self.key, self.group, self.state.reason)
            raise CommandBuildError(self.state.reason)
        return XGroupCommand(_assemble(self.key, self.group, self.state))
