#!/usr/bin/env python3
"""
Utility: check the configured access token and print a person's sources.

Usage:
  python scripts/hello_user.py
  python scripts/hello_user.py --person KWQS-BBQ

Greets the user the token belongs to. With --person, also runs the sources
query for that person and prints each reference with the description it
resolves to.

Requires: FS_ACCESS_TOKEN in environment (and FS_ENVIRONMENT if not integration).
"""
from __future__ import annotations
import argparse
import asyncio
import os
import sys

# Add project src to path if not already available
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from fs_sources.log import setup_logging, get_logger
from fs_sources.transport import Transport
from fs_sources.users import get_current_user
from fs_sources.sources.api import SourcesClient

logger = get_logger("hello_user")


def print_sources(view):
    refs = view.get_source_refs()
    if not refs:
        print("No sources attached.")
        return
    for ref in refs:
        print("---")
        print(f"ref: {ref.id}  tags: {', '.join(t for t in ref.tag_resources if t)}")
        description = ref.source_description
        if description is not None:
            print(f"title: {description.title}")
            print(f"citation: {description.citation}")
        else:
            print(f"description: {ref.description}")


async def run(person_id: str | None):
    async with Transport() as transport:
        user = await get_current_user(transport)
        if user is None:
            print("The API did not return a current user.")
            return
        print(f"Hello {user.contact_name}")

        if person_id:
            client = SourcesClient(transport)
            view = await client.get_sources_query(f"/platform/tree/persons/{person_id}/sources")
            print_sources(view)


def main():
    p = argparse.ArgumentParser(description="Greet the token's user and optionally list a person's sources")
    p.add_argument("--person", help="Person id whose sources to print (e.g., KWQS-BBQ)")
    args = p.parse_args()

    setup_logging()
    try:
        asyncio.run(run(args.person))
    except Exception:
        logger.exception("Request failed")
        sys.exit(1)


if __name__ == '__main__':
    main()
