#!/usr/bin/env python3
"""
Agent Skill Toolkit - Jira CLI

Read and write Jira issues from the command line. Results are printed as
JSON on stdout.

Usage:
    python scripts/jira_cli.py get PROJ-123
    python scripts/jira_cli.py search "assignee = currentUser() AND status != Done" --max-results 20
    python scripts/jira_cli.py create '{"project": "PROJ", "type": "Bug", "summary": "Login fails"}'
    python scripts/jira_cli.py create '[{"project": "PROJ", "type": "Task", "summary": "Task 1"}, ...]'
    python scripts/jira_cli.py update PROJ-123 '{"status": "Done", "labels": ["urgent"]}'
    python scripts/jira_cli.py comment PROJ-123 get
    python scripts/jira_cli.py comment PROJ-123 add "Deployed to staging"

Issue fields for create:
    project, type, summary (required)
    description, priority, assignee, labels, components, duedate, parent (optional)

Exit codes:
    0 - Success (bulk create succeeds even when individual issues fail)
    1 - Configuration, input or API error
"""

from __future__ import annotations

import argparse
import sys
from typing import Any
from urllib.parse import quote

from atlassian_client import (
    AtlassianClient,
    AtlassianError,
    ConfigError,
    adf_paragraph,
    exit_with_error,
    load_config,
    output,
    parse_json_arg,
)

ISSUE_FIELDS = (
    "summary,description,status,issuetype,priority,assignee,reporter,created,updated,"
    "duedate,labels,components,fixVersions,parent,subtasks,comment"
)

SEARCH_FIELDS = [
    "summary",
    "status",
    "issuetype",
    "priority",
    "assignee",
    "reporter",
    "created",
    "updated",
    "duedate",
    "labels",
]

REQUIRED_CREATE_FIELDS = ("project", "type", "summary")
STRING_CREATE_FIELDS = ("project", "type", "summary", "description", "priority", "assignee", "duedate", "parent")
LIST_CREATE_FIELDS = ("labels", "components")

# Comments included in `get` output, most recent last
RECENT_COMMENTS = 5

DEFAULT_MAX_RESULTS = 50


def issue_path(issue_key: str, suffix: str = "") -> str:
    path = f"issue/{quote(issue_key, safe='')}"
    return f"{path}/{suffix}" if suffix else path


def browse_url(client: AtlassianClient, issue_key: str) -> str:
    return f"{client.site_url}/browse/{issue_key}"


def _person(person: dict[str, Any] | None) -> dict[str, Any] | None:
    if not person:
        return None
    return {"name": person.get("displayName"), "email": person.get("emailAddress")}


# =============================================================================
# Read
# =============================================================================


def get_issue(client: AtlassianClient, issue_key: str) -> dict[str, Any]:
    """Fetch one issue and flatten the fields worth showing."""
    issue = client.jira_get(
        issue_path(issue_key),
        {"fields": ISSUE_FIELDS, "expand": "renderedFields"},
    ).unwrap(f"Failed to get issue {issue_key}")

    fields = issue["fields"]
    parent = fields.get("parent")
    comments = (fields.get("comment") or {}).get("comments", [])

    return {
        "key": issue["key"],
        "id": issue["id"],
        "url": browse_url(client, issue["key"]),
        "summary": fields.get("summary"),
        "description": fields.get("description"),
        "type": fields["issuetype"]["name"],
        "status": fields["status"]["name"],
        "priority": (fields.get("priority") or {}).get("name", "None"),
        "assignee": _person(fields.get("assignee")),
        "reporter": _person(fields.get("reporter")),
        "created": fields.get("created"),
        "updated": fields.get("updated"),
        "duedate": fields.get("duedate"),
        "labels": fields.get("labels") or [],
        "components": [c["name"] for c in fields.get("components") or []],
        "fixVersions": [v["name"] for v in fields.get("fixVersions") or []],
        "parent": {"key": parent["key"], "summary": parent["fields"]["summary"]} if parent else None,
        "subtasks": [
            {"key": s["key"], "summary": s["fields"]["summary"], "status": s["fields"]["status"]["name"]}
            for s in fields.get("subtasks") or []
        ],
        "recentComments": [
            {"author": c["author"]["displayName"], "body": c.get("body"), "created": c.get("created")}
            for c in comments[-RECENT_COMMENTS:]
        ],
    }


def search_issues(
    client: AtlassianClient,
    jql: str,
    max_results: int = DEFAULT_MAX_RESULTS,
    page_token: str | None = None,
) -> dict[str, Any]:
    """Run a JQL search; pass the returned nextPageToken back in to page."""
    params: dict[str, Any] = {"jql": jql, "maxResults": str(max_results), "fields": SEARCH_FIELDS}
    if page_token:
        params["nextPageToken"] = page_token

    data = client.jira_get("search/jql", params).unwrap("Search failed")

    issues = []
    for issue in data.get("issues", []):
        fields = issue["fields"]
        issues.append(
            {
                "key": issue["key"],
                "url": browse_url(client, issue["key"]),
                "summary": fields.get("summary"),
                "type": fields["issuetype"]["name"],
                "status": fields["status"]["name"],
                "priority": (fields.get("priority") or {}).get("name", "None"),
                "assignee": (fields.get("assignee") or {}).get("displayName", "Unassigned"),
                "reporter": (fields.get("reporter") or {}).get("displayName", "Unknown"),
                "created": fields.get("created"),
                "updated": fields.get("updated"),
                "duedate": fields.get("duedate"),
                "labels": fields.get("labels") or [],
            }
        )

    return {
        "returned": len(issues),
        "isLast": data.get("isLast", True),
        "nextPageToken": data.get("nextPageToken"),
        "issues": issues,
    }


# =============================================================================
# Create
# =============================================================================


def get_project_id(client: AtlassianClient, project_key: str) -> str:
    response = client.jira_get("project/search", {"keys": project_key})
    values = (response.data or {}).get("values") if response.ok else None
    if not values:
        raise AtlassianError(f'Project "{project_key}" not found')
    return values[0]["id"]


def get_issue_type_id(client: AtlassianClient, project_id: str, type_name: str) -> str:
    response = client.jira_get(f"project/{project_id}")
    issue_types = (response.data or {}).get("issueTypes") if response.ok else None
    if not issue_types:
        raise AtlassianError("Failed to get issue types for project")

    for issue_type in issue_types:
        if issue_type["name"].lower() == type_name.lower():
            return issue_type["id"]

    available = ", ".join(it["name"] for it in issue_types)
    raise AtlassianError(f'Issue type "{type_name}" not found. Available: {available}')


def build_create_fields(spec: dict[str, Any], project_id: str, issue_type_id: str) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "project": {"id": project_id},
        "issuetype": {"id": issue_type_id},
        "summary": spec["summary"],
    }
    if spec.get("description"):
        fields["description"] = adf_paragraph(spec["description"])
    if spec.get("priority"):
        fields["priority"] = {"name": spec["priority"]}
    if spec.get("assignee"):
        fields["assignee"] = {"id": spec["assignee"]}
    if spec.get("labels"):
        fields["labels"] = spec["labels"]
    if spec.get("components"):
        fields["components"] = [{"name": name} for name in spec["components"]]
    if spec.get("duedate"):
        fields["duedate"] = spec["duedate"]
    if spec.get("parent"):
        fields["parent"] = {"key": spec["parent"]}
    return fields


def check_field_types(spec: dict[str, Any]) -> None:
    """Raise ConfigError for a field whose JSON type cannot be sent as-is."""
    for name in STRING_CREATE_FIELDS:
        value = spec.get(name)
        if value is not None and not isinstance(value, str):
            raise ConfigError(f'Field "{name}" must be a string')
    for name in LIST_CREATE_FIELDS:
        value = spec.get(name)
        if value is not None and not (isinstance(value, list) and all(isinstance(v, str) for v in value)):
            raise ConfigError(f'Field "{name}" must be a list of strings')


def create_issue(client: AtlassianClient, spec: dict[str, Any]) -> dict[str, str]:
    """Create one issue from a field spec.

    Raises:
        ConfigError: required fields are missing or have the wrong type
        AtlassianError: project, issue type or the create call failed
    """
    if not isinstance(spec, dict) or not all(spec.get(name) for name in REQUIRED_CREATE_FIELDS):
        raise ConfigError(f"Missing required fields: {', '.join(REQUIRED_CREATE_FIELDS)}")
    check_field_types(spec)

    project_id = get_project_id(client, spec["project"])
    issue_type_id = get_issue_type_id(client, project_id, spec["type"])
    fields = build_create_fields(spec, project_id, issue_type_id)

    created = client.jira_post("issue", {"fields": fields}).unwrap("Failed to create issue")
    return {"key": created["key"], "url": browse_url(client, created["key"])}


def create_issues(client: AtlassianClient, specs: list[Any]) -> dict[str, Any]:
    """Create issues one after another; a failed item is recorded and skipped."""
    results: list[dict[str, str]] = []
    for spec in specs:
        try:
            results.append(create_issue(client, spec))
        except (ConfigError, AtlassianError) as exc:
            results.append({"error": str(exc)})

    return {
        "created": sum(1 for r in results if "key" in r),
        "failed": sum(1 for r in results if "error" in r),
        "results": results,
    }


# =============================================================================
# Update
# =============================================================================


def transition_issue(client: AtlassianClient, issue_key: str, target_status: str) -> None:
    """Move an issue through the transition whose name or target status matches."""
    data = client.jira_get(issue_path(issue_key, "transitions")).unwrap("Failed to get available transitions")
    transitions = data.get("transitions", [])

    wanted = target_status.lower()
    transition = next(
        (t for t in transitions if t["name"].lower() == wanted or t["to"]["name"].lower() == wanted),
        None,
    )
    if transition is None:
        available = ", ".join(t["name"] for t in transitions)
        raise AtlassianError(f'Cannot transition to "{target_status}". Available: {available}')

    client.jira_post(
        issue_path(issue_key, "transitions"),
        {"transition": {"id": transition["id"]}},
    ).unwrap("Transition failed")


def build_update_fields(updates: dict[str, Any]) -> dict[str, Any]:
    """Map user-facing update keys to Jira fields; null clears a field."""
    fields: dict[str, Any] = {}
    if "summary" in updates:
        fields["summary"] = updates["summary"]
    if "description" in updates:
        description = updates["description"]
        fields["description"] = adf_paragraph(description) if description else None
    if "priority" in updates:
        fields["priority"] = {"name": updates["priority"]}
    if "assignee" in updates:
        assignee = updates["assignee"]
        fields["assignee"] = {"id": assignee} if assignee else None
    if "labels" in updates:
        fields["labels"] = updates["labels"]
    if "duedate" in updates:
        fields["duedate"] = updates["duedate"]
    return fields


def update_issue(client: AtlassianClient, issue_key: str, updates: dict[str, Any]) -> dict[str, Any]:
    """Apply a status transition (if requested) and then field updates."""
    status = updates.get("status")
    if status:
        transition_issue(client, issue_key, status)

    fields = build_update_fields(updates)
    if fields:
        client.jira_put(issue_path(issue_key), {"fields": fields}).unwrap("Update failed")

    result: dict[str, Any] = {"key": issue_key, "updated": True}
    if fields:
        result["fields"] = list(fields)
    if status:
        result["transitioned"] = status
    return result


# =============================================================================
# Comments
# =============================================================================


def get_comments(client: AtlassianClient, issue_key: str) -> dict[str, Any]:
    data = client.jira_get(issue_path(issue_key, "comment"), {"orderBy": "-created"}).unwrap(
        "Failed to get comments"
    )
    return {
        "issueKey": issue_key,
        "total": data.get("total", 0),
        "comments": [
            {
                "id": c["id"],
                "author": c["author"]["displayName"],
                "body": c.get("body"),
                "created": c.get("created"),
                "updated": c.get("updated"),
            }
            for c in data.get("comments", [])
        ],
    }


def add_comment(client: AtlassianClient, issue_key: str, text: str) -> dict[str, Any]:
    if not text:
        raise ConfigError("Comment text is required")
    created = client.jira_post(issue_path(issue_key, "comment"), {"body": adf_paragraph(text)}).unwrap(
        "Failed to add comment"
    )
    return {"issueKey": issue_key, "commentId": created["id"], "created": created.get("created"), "success": True}


# =============================================================================
# CLI
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Jira issue operations")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Get issue details")
    get_parser.add_argument("issue_key", help="Issue key (e.g., PROJ-123)")

    search_parser = subparsers.add_parser("search", help="Search issues with JQL")
    search_parser.add_argument("jql", help="Jira Query Language query")
    search_parser.add_argument("--max-results", type=int, default=DEFAULT_MAX_RESULTS, help="Max results (max 100)")
    search_parser.add_argument("--page-token", help="nextPageToken from a previous search")

    create_parser = subparsers.add_parser("create", help="Create one issue (object) or many (array)")
    create_parser.add_argument("json", help="Issue configuration as JSON")

    update_parser = subparsers.add_parser("update", help="Update fields and/or transition status")
    update_parser.add_argument("issue_key", help="Issue key (e.g., PROJ-123)")
    update_parser.add_argument("json", help="Updates as a JSON object")

    comment_parser = subparsers.add_parser("comment", help="List or add comments")
    comment_parser.add_argument("issue_key", help="Issue key (e.g., PROJ-123)")
    comment_parser.add_argument("action", choices=["get", "add"])
    comment_parser.add_argument("text", nargs="?", default="", help='Comment text (for "add")')

    return parser


def run(client: AtlassianClient, args: argparse.Namespace) -> Any:
    """Dispatch a parsed command and return its JSON-ready result."""
    if args.command == "get":
        return get_issue(client, args.issue_key)
    if args.command == "search":
        return search_issues(client, args.jql, args.max_results, args.page_token)
    if args.command == "create":
        config = parse_json_arg(args.json, "issue config")
        if isinstance(config, list):
            return create_issues(client, config)
        return create_issue(client, config)
    if args.command == "update":
        updates = parse_json_arg(args.json, "updates")
        if not isinstance(updates, dict):
            raise ConfigError("Updates must be a JSON object")
        return update_issue(client, args.issue_key, updates)
    if args.action == "get":
        return get_comments(client, args.issue_key)
    return add_comment(client, args.issue_key, args.text)


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
