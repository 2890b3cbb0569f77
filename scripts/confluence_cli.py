#!/usr/bin/env python3
"""
Agent Skill Toolkit - Confluence CLI

Read, search, create and update Confluence pages. Results are printed as
JSON on stdout. Page bodies use the storage (XHTML) representation.

Usage:
    python scripts/confluence_cli.py get 123456
    python scripts/confluence_cli.py get "API Documentation" --space DEV
    python scripts/confluence_cli.py search "type = page AND space = DEV" --limit 50
    python scripts/confluence_cli.py create '{"space": "DEV", "title": "My Page", "body": "<p>Hello</p>"}'
    python scripts/confluence_cli.py update 123456 '{"title": "New Title"}'

Exit codes:
    0 - Success
    1 - Configuration, input or API error
"""

from __future__ import annotations

import argparse
import re
import sys
from typing import Any

from atlassian_client import (
    AtlassianClient,
    AtlassianError,
    ConfigError,
    exit_with_error,
    load_config,
    output,
    parse_json_arg,
)

PAGE_ID_PATTERN = re.compile(r"^\d+$")

PAGE_EXPAND = "space,version,body.storage"

DEFAULT_LIMIT = 25


def page_url(client: AtlassianClient, page: dict[str, Any]) -> str:
    return f"{client.site_url}/wiki{page['_links']['webui']}"


def storage_body(value: str) -> dict[str, Any]:
    return {"storage": {"value": value, "representation": "storage"}}


def summarize_page(client: AtlassianClient, page: dict[str, Any]) -> dict[str, Any]:
    """Flatten a legacy content response expanded with space, version and body."""
    version = page["version"]
    return {
        "id": page["id"],
        "title": page["title"],
        "type": page.get("type"),
        "status": page.get("status"),
        "space": {"key": page["space"]["key"], "name": page["space"]["name"]},
        "version": version["number"],
        "lastModified": version.get("when"),
        "lastModifiedBy": (version.get("by") or {}).get("displayName"),
        "url": page_url(client, page),
        "body": page["body"]["storage"]["value"],
    }


def quote_cql(value: str) -> str:
    return '"' + value.replace('"', '\\"') + '"'


def get_page(client: AtlassianClient, page_id: str) -> dict[str, Any]:
    page = client.confluence_legacy_get(f"content/{page_id}", {"expand": PAGE_EXPAND}).unwrap(
        f"Failed to get page {page_id}"
    )
    return summarize_page(client, page)


def get_page_by_title(client: AtlassianClient, title: str, space_key: str) -> dict[str, Any]:
    """Find a page by exact title within a space."""
    cql = f"title = {quote_cql(title)} AND space = {quote_cql(space_key)} AND type = page"
    data = client.confluence_legacy_get(
        "content/search",
        {"cql": cql, "limit": "1", "expand": PAGE_EXPAND},
    ).unwrap("Search failed")

    results = data.get("results") or []
    if not results:
        raise AtlassianError(f'Page "{title}" not found in space {space_key}')
    return summarize_page(client, results[0])


def search_pages(client: AtlassianClient, cql: str, limit: int = DEFAULT_LIMIT, start: int = 0) -> dict[str, Any]:
    """Run a CQL search; page with start/limit."""
    data = client.confluence_legacy_get(
        "content/search",
        {"cql": cql, "limit": str(limit), "start": str(start), "expand": "space,version"},
    ).unwrap("Search failed")

    pages = [
        {
            "id": page["id"],
            "title": page["title"],
            "type": page.get("type"),
            "status": page.get("status"),
            "space": {"key": page["space"]["key"], "name": page["space"]["name"]},
            "version": page["version"]["number"],
            "lastModified": page["version"].get("when"),
            "url": page_url(client, page),
        }
        for page in data.get("results", [])
    ]

    return {
        "total": data.get("totalSize") or data.get("size", len(pages)),
        "returned": len(pages),
        "start": data.get("start", start),
        "hasMore": bool((data.get("_links") or {}).get("next")),
        "pages": pages,
    }


def create_page(client: AtlassianClient, spec: dict[str, Any]) -> dict[str, Any]:
    """Create a page from {space, title, body[, parentId]}."""
    if not isinstance(spec, dict) or not all(spec.get(name) for name in ("space", "title", "body")):
        raise ConfigError("Missing required fields: space, title, body")

    body: dict[str, Any] = {
        "type": "page",
        "title": spec["title"],
        "space": {"key": spec["space"]},
        "body": storage_body(spec["body"]),
    }
    if spec.get("parentId"):
        body["ancestors"] = [{"id": spec["parentId"]}]

    response = client.confluence_legacy_post("content", body)
    if not response.ok:
        raise AtlassianError(f"Failed to create page: {response.error}")

    page = response.data
    return {"id": page["id"], "title": page["title"], "url": page_url(client, page), "success": True}


def update_page(client: AtlassianClient, page_id: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Update title and/or body, bumping the page version by one."""
    if not updates.get("title") and not updates.get("body"):
        raise ConfigError("At least one of title or body must be provided")

    current = client.confluence_legacy_get(f"content/{page_id}", {"expand": "version"}).unwrap(
        f"Failed to get page {page_id}"
    )

    body: dict[str, Any] = {
        "id": page_id,
        "type": current.get("type", "page"),
        "title": updates.get("title") or current["title"],
        "version": {"number": current["version"]["number"] + 1},
    }
    if updates.get("body"):
        body["body"] = storage_body(updates["body"])

    response = client.confluence_legacy_put(f"content/{page_id}", body)
    if not response.ok:
        raise AtlassianError(f"Failed to update page: {response.error}")

    page = response.data
    return {
        "id": page["id"],
        "title": page["title"],
        "version": page["version"]["number"],
        "url": page_url(client, page),
        "success": True,
    }


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Confluence page operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Get a page by ID, or by title with --space")
    get_parser.add_argument("page", help="Numeric page ID or page title")
    get_parser.add_argument("--space", help="Space key (required when looking up by title)")

    search_parser = subparsers.add_parser("search", help="Search pages with CQL")
    search_parser.add_argument("cql", help="Confluence Query Language query")
    search_parser.add_argument("--limit", type=int, default=DEFAULT_LIMIT, help="Max results (max 100)")
    search_parser.add_argument("--start", type=int, default=0, help="Offset for pagination")

    create_parser = subparsers.add_parser("create", help="Create a page")
    create_parser.add_argument("json", help='Page config: {"space", "title", "body", "parentId"?}')

    update_parser = subparsers.add_parser("update", help="Update a page title and/or body")
    update_parser.add_argument("page_id", help="Numeric page ID")
    update_parser.add_argument("json", help='Updates: {"title"?, "body"?}')

    return parser


def run(client: AtlassianClient, args: argparse.Namespace) -> Any:
    """Dispatch a parsed command and return its JSON-ready result."""
    if args.command == "get":
        if PAGE_ID_PATTERN.match(args.page):
            return get_page(client, args.page)
        if not args.space:
            raise ConfigError("Space key is required when searching by title")
        return get_page_by_title(client, args.page, args.space)
    if args.command == "search":
        return search_pages(client, args.cql, args.limit, args.start)
    if args.command == "create":
        return create_page(client, parse_json_arg(args.json, "page config"))
    updates = parse_json_arg(args.json, "updates")
    if not isinstance(updates, dict):
        raise ConfigError("Updates must be a JSON object")
    return update_page(client, args.page_id, updates)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    try:
        client = AtlassianClient(load_config())
        output(run(client, args))
    except (ConfigError, AtlassianError) as exc:
        return exit_with_error(str(exc))

    return 0


if __name__ == "__main__":
    sys.exit(main())
