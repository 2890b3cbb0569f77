#!/usr/bin/env python3
"""
Agent Skill Toolkit - Agent Scaffolder

Creates a new agent definition at .opencode/agent/<name>.md with a role,
output format and constraints skeleton. The name is normalized to
kebab-case; an existing agent file is never overwritten.

Usage:
    python scripts/init_agent.py code-reviewer
    python scripts/init_agent.py code-reviewer --mode primary --tool write --tool edit

Exit codes:
    0 - Agent created
    1 - Invalid name, or the agent file already exists
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import yaml

from skill_validation_common import ScaffoldError, fail, to_kebab_case

AGENTS_DIR = Path(".opencode") / "agent"

AGENT_MODES = ("subagent", "primary", "all")
AGENT_TOOLS = ("write", "edit", "bash")

AGENT_DESCRIPTION = """description: >
  [What this agent does]. Use when: [specific trigger scenarios].
"""

AGENT_BODY = """
# Role

You are a [specific role] specialized in [domain].

# Expertise

You have deep knowledge of:
- [Area 1]
- [Area 2]
- [Area 3]

# Behavior

When given a task:

1. [First action to take]
2. [Second action to take]
3. [Third action to take]

# Output Format

## Summary
[One-line finding]

## Details
[Structured findings]

## Recommendations
- [Actionable item 1]
- [Actionable item 2]

# Constraints

- [What NOT to do]
- [Limitation to respect]
"""


def render_agent(mode: str = "subagent", enabled_tools: tuple[str, ...] = ()) -> str:
    """Render the agent template; tools not listed in enabled_tools are disabled."""
    settings = {
        "mode": mode,
        "tools": {tool: tool in enabled_tools for tool in AGENT_TOOLS},
    }
    header = yaml.safe_dump(settings, sort_keys=False, default_flow_style=False)
    return f"---\n{AGENT_DESCRIPTION}{header}---\n{AGENT_BODY}"


def create_agent(
    name: str,
    root: Path,
    mode: str = "subagent",
    enabled_tools: tuple[str, ...] = (),
) -> Path:
    """Write a new agent file under root and return its path.

    Raises:
        ScaffoldError: the name is empty after normalization, or the agent exists
    """
    agent_name = to_kebab_case(name)
    if not agent_name:
        raise ScaffoldError(f"Invalid agent name: {name!r}")

    agent_dir = root / AGENTS_DIR
    agent_file = agent_dir / f"{agent_name}.md"
    if agent_file.exists():
        raise ScaffoldError(f"Agent already exists: {agent_file}")

    agent_dir.mkdir(parents=True, exist_ok=True)
    agent_file.write_text(render_agent(mode, enabled_tools), encoding="utf-8")
    return agent_file


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a new agent from the template")
    parser.add_argument("name", help="Agent name (normalized to kebab-case)")
    parser.add_argument("--mode", choices=AGENT_MODES, default="subagent", help="Agent mode (default: subagent)")
    parser.add_argument(
        "--tool",
        action="append",
        choices=AGENT_TOOLS,
        default=[],
        help="Enable a tool (repeatable); all tools are disabled by default",
    )
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Project root (default: current directory)")
    args = parser.parse_args()

    try:
        agent_file = create_agent(args.name, args.root, args.mode, tuple(args.tool))
    except ScaffoldError as exc:
        return fail(str(exc))

    print(f"Created agent: {agent_file}")
    print("")
    print("Next steps:")
    print(f"  1. Edit {agent_file}")
    print("     - Update the description with trigger scenarios")
    print("     - Define the role and expertise")
    print("     - Set appropriate tool permissions")
    print("     - Specify the output format")
    print("")
    print(f"  2. Validate: python scripts/validate_agent.py {agent_file}")
    print("")
    print(f"  3. Invoke with: @{agent_file.stem} <task>")

    return 0


if __name__ == "__main__":
    sys.exit(main())
