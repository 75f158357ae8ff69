# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Tests for the XGROUP builder and its acknowledgement decoder."""

import pytest

from pyxstream.exceptions import (
    CommandBuildError,
    DecodeError,
    GroupAlreadyExistsError,
    GroupNotFoundError,
    ServerError,
)
from pyxstream.protocol import ReplyError
from pyxstream.xgroup import (
    Create,
    Invalid,
    SetId,
    Unset,
    XGroup,
    XGroupCommand,
)


class TestXGroupFrames:
    """Tests for frame assembly per sub-command."""

    def test_create_mkstream(self) -> None:
        """Test the create + mkstream scenario."""
        cmd = XGroup("orders", "g1").create().make_stream().build()
        assert cmd.to_request() == [b"XGROUP", b"CREATE", b"orders", b"g1", b"$", b"MKSTREAM"]

    def test_create_all_options(self) -> None:
        """Test option tokens follow the id in a fixed order."""
        cmd = XGroup("orders", "g1").create().entries_read().make_stream().id("0").build()
        assert cmd.to_request() == [
            b"XGROUP", b"CREATE", b"orders", b"g1", b"0", b"MKSTREAM", b"ENTRIESREAD",
        ]

    def test_create_default_id(self) -> None:
        """Test create without an id emits $."""
        cmd = XGroup("orders", "g1").create().build()
        assert cmd.to_request() == [b"XGROUP", b"CREATE", b"orders", b"g1", b"$"]

    def test_create_explicit_id(self) -> None:
        """Test create with an explicit id."""
        cmd = XGroup("orders", "g1").create().id("5-0").build()
        assert cmd.to_request()[4] == b"5-0"

    def test_set_id(self) -> None:
        """Test set-id with and without options."""
        assert XGroup("orders", "g1").set_id().build().to_request() == [
            b"XGROUP", b"SETID", b"orders", b"g1", b"$",
        ]
        assert XGroup("orders", "g1").set_id().id("5-0").entries_read().build().to_request() == [
            b"XGROUP", b"SETID", b"orders", b"g1", b"5-0", b"ENTRIESREAD",
        ]

    def test_destroy(self) -> None:
        """Test destroy has no trailing tokens."""
        cmd = XGroup("orders", "g1").destroy().build()
        assert cmd.to_request() == [b"XGROUP", b"DESTROY", b"orders", b"g1"]

    def test_create_consumer(self) -> None:
        """Test the consumer name follows the group name."""
        cmd = XGroup("orders", "g1").create_consumer("c1").build()
        assert cmd.to_request() == [b"XGROUP", b"CREATECONSUMER", b"orders", b"g1", b"c1"]

    def test_delete_consumer(self) -> None:
        """Test the DELCONSUMER token."""
        cmd = XGroup("orders", "g1").delete_consumer("c1").build()
        assert cmd.to_request() == [b"XGROUP", b"DELCONSUMER", b"orders", b"g1", b"c1"]

    @pytest.mark.parametrize(
        "builder, token",
        [
            (XGroup("s", "g").create(), b"CREATE"),
            (XGroup("s", "g").set_id(), b"SETID"),
            (XGroup("s", "g").destroy(), b"DESTROY"),
            (XGroup("s", "g").create_consumer("c"), b"CREATECONSUMER"),
            (XGroup("s", "g").delete_consumer("c"), b"DELCONSUMER"),
        ],
    )
    def test_sub_command_is_second_token(self, builder: XGroup, token: bytes) -> None:
        """Test every sub-command token sits right after XGROUP."""
        cmd = builder.build()
        assert cmd.to_request()[:2] == [b"XGROUP", token]
        assert cmd.sub_command == token.decode()

    def test_build_is_idempotent(self) -> None:
        """Test building the same builder twice yields identical frames."""
        builder = XGroup("orders", "g1").create().id("5-0").make_stream()
        first, second = builder.build(), builder.build()
        assert first == second
        assert first.to_request() == second.to_request()

    def test_to_request_returns_copy(self) -> None:
        """Test mutating a returned frame does not change the command."""
        cmd = XGroup("orders", "g1").destroy().build()
        cmd.to_request().append(b"junk")
        assert cmd.to_request() == [b"XGROUP", b"DESTROY", b"orders", b"g1"]


class TestXGroupStateMachine:
    """Tests for sub-command state transitions."""

    def test_initial_state(self) -> None:
        """Test a new builder has no sub-command."""
        assert XGroup("orders", "g1").state == Unset()

    def test_builder_is_immutable(self) -> None:
        """Test each call returns a new builder."""
        base = XGroup("orders", "g1")
        created = base.create()
        created.make_stream()
        assert base.state == Unset()
        assert created.state == Create()

    def test_selection_discards_options(self) -> None:
        """Test switching sub-command drops accumulated options."""
        builder = XGroup("orders", "g1").create().id("1-0").make_stream().set_id()
        assert builder.state == SetId()

    def test_not_set(self) -> None:
        """Test building without a sub-command fails."""
        with pytest.raises(CommandBuildError, match="sub-command not set"):
            XGroup("orders", "g1").build()

    @pytest.mark.parametrize(
        "builder, reason",
        [
            (XGroup("s", "g").destroy().make_stream(), "mkstream only used in create sub command"),
            (XGroup("s", "g").set_id().make_stream(), "mkstream only used in create sub command"),
            (XGroup("s", "g").destroy().id("1-0"), "id only used in create or setid sub command"),
            (
                XGroup("s", "g").create_consumer("c").entries_read(),
                "entriesread only used in create or setid sub command",
            ),
            (XGroup("s", "g").id("1-0"), "id only used in create or setid sub command"),
        ],
    )
    def test_illegal_option(self, builder: XGroup, reason: str) -> None:
        """Test an illegal option invalidates the builder with its reason."""
        assert builder.state == Invalid(reason)
        with pytest.raises(CommandBuildError) as exc_info:
            builder.build()
        assert exc_info.value.reason == reason

    def test_invalid_is_sticky_for_options(self) -> None:
        """Test later options keep the builder invalid with the first reason."""
        builder = XGroup("s", "g").destroy().make_stream().id("1-0").entries_read()
        assert builder.state == Invalid("mkstream only used in create sub command")

    def test_selection_leaves_invalid(self) -> None:
        """Test selecting a sub-command starts over from an invalid builder."""
        builder = XGroup("s", "g").destroy().make_stream().create()
        assert builder.build().to_request() == [b"XGROUP", b"CREATE", b"s", b"g", b"$"]


class TestXGroupOutput:
    """Tests for XGroupCommand.to_output."""

    @pytest.fixture
    def cmd(self) -> XGroupCommand:
        return XGroup("orders", "g1").create().make_stream().build()

    def test_ok(self, cmd: XGroupCommand) -> None:
        """Test status OK is success."""
        assert cmd.to_output("OK") is None

    def test_integer(self, cmd: XGroupCommand) -> None:
        """Test integer replies are success."""
        assert cmd.to_output(0) is None
        assert cmd.to_output(1) is None

    def test_busygroup(self, cmd: XGroupCommand) -> None:
        """Test an error status carries the server string."""
        message = "BUSYGROUP Consumer Group name already exists"
        with pytest.raises(GroupAlreadyExistsError) as exc_info:
            cmd.to_output(message)
        assert isinstance(exc_info.value, ServerError)
        assert exc_info.value.message == message

    def test_nogroup(self, cmd: XGroupCommand) -> None:
        """Test NOGROUP maps to GroupNotFoundError."""
        with pytest.raises(GroupNotFoundError):
            cmd.to_output("NOGROUP No such key 'orders' or consumer group 'g1'")

    def test_other_status(self, cmd: XGroupCommand) -> None:
        """Test any other status is a plain ServerError."""
        with pytest.raises(ServerError) as exc_info:
            cmd.to_output("QUEUED")
        assert type(exc_info.value) is ServerError
        assert exc_info.value.message == "QUEUED"

    @pytest.mark.parametrize("reply", [b"OK", [], None, ReplyError("ERR x")])
    def test_other_shapes(self, cmd: XGroupCommand, reply) -> None:
        """Test other shapes are decode errors."""
        with pytest.raises(DecodeError, match="string or integer"):
            cmd.to_output(reply)
