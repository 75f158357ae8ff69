# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Command contract shared by every PyXStream command."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ClassVar

from .protocol import Reply


class Command(ABC):
    """
    A command that knows how to frame itself and decode its reply.

    ``to_request`` produces the outgoing frame; ``to_output`` turns the
    server's generic reply into the command's typed result, raising
    ``DecodeError`` or ``ServerError`` when it cannot.
    """

    name: ClassVar[str]

    @abstractmethod
    def to_request(self) -> list[bytes]:
        """Return the ordered command tokens."""

    @abstractmethod
    def to_output(self, reply: Reply) -> Any:
        """Decode the reply to this command."""
