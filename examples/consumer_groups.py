#!/usr/bin/env python3
"""
consumer_groups.py - Consumer Group Administration Example

Demonstrates creating, inspecting and removing consumer groups on a stream.

This example demonstrates:
    - Using connect() for one-liner connection
    - Building XGROUP commands with the immutable builder
    - Reading summary and detailed XINFO views
    - Handling BUSYGROUP and builder errors

Prerequisites:
    - A RESP server with stream support running on localhost:6379
    - pyxstream installed

Run with:
    python consumer_groups.py
"""

from pyxstream import (
    CommandBuildError,
    GroupAlreadyExistsError,
    GroupsDetail,
    XGroup,
    XInfo,
    XInfoType,
    connect,
)


def create_group(client, key: str, group: str):
    """Create a group, creating the stream if needed"""
    print(f"\n=== Creating group '{group}' on '{key}' ===")
    try:
        client.xgroup_create(key, group, "0", mkstream=True)
        print("  Created")
    except GroupAlreadyExistsError as e:
        print(f"  Already exists: {e.message}")


def show_stream(client, key: str):
    """Print the summary and detailed stream views"""
    print(f"\n=== Stream '{key}' ===")
    info = client.xinfo_stream(key)
    print(f"  length={info.length} last-id={info.last_generated_id} groups={info.groups.count}")

    full = client.execute(XInfo(key, XInfoType.stream(count=5)).full())
    if isinstance(full.groups, GroupsDetail):
        for group in full.groups.groups:
            print(f"  group {group.name}: lag={group.lag} pending={group.pel_count}")
            for consumer in group.consumers:
                print(f"    consumer {consumer.name}: pending={consumer.pel_count}")


def main():
    key = "example-orders"

    with connect("localhost:6379", client_name="consumer-groups-example") as client:
        create_group(client, key, "billing")
        create_group(client, key, "billing")

        client.xgroup_createconsumer(key, "billing", "worker-1")
        show_stream(client, key)

        for group in client.xinfo_groups(key):
            print(f"\n  {group.name}: consumers={group.consumers} entries-read={group.entries_read}")

        # Options outside their sub-command are rejected before anything is sent
        try:
            XGroup(key, "billing").destroy().make_stream().build()
        except CommandBuildError as e:
            print(f"\n  Rejected: {e.reason}")

        client.xgroup_delconsumer(key, "billing", "worker-1")
        client.xgroup_destroy(key, "billing")
        print("\nDone!")


if __name__ == "__main__":
    main()
