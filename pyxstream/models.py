# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Pydantic models for PyXStream configuration.

Provides validated client settings.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ClientConfig(BaseModel):
    """Configuration for StreamClient."""

    model_config = ConfigDict(validate_assignment=True)

    address: str = Field(
        default="localhost:6379",
        description="Server address as host:port",
    )
    connect_timeout_ms: int = Field(default=5000, ge=100, le=300000)
    socket_timeout_ms: int = Field(default=30000, ge=100, le=300000)

    # Authentication (AUTH) and database selection (SELECT)
    username: str | None = None
    password: str | None = None
    db: int = Field(default=0, ge=0)

    # Client identification (CLIENT SETNAME)
    client_name: str | None = None

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        host, sep, port = v.rpartition(":")
        if not sep or not host:
            raise ValueError("Address must be in host:port form")
        if not port.isdigit() or not 0 < int(port) < 65536:
            raise ValueError(f"Invalid port in address: {port!r}")
        return v

    @field_validator("client_name")
    @classmethod
    def validate_client_name(cls, v: str | None) -> str | None:
        if v is not None and (not v or any(c.isspace() for c in v)):
            raise ValueError("Client name must be non-empty and contain no spaces")
        return v

    def get_host_port(self) -> tuple[str, int]:
        """Split the address into host and port."""
        host, _, port = self.address.rpartition(":")
        return host.strip("[]"), int(port)
