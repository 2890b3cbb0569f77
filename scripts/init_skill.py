#!/usr/bin/env python3
"""
Agent Skill Toolkit - Skill Scaffolder

Creates a new skill from the standard template:

    .opencode/skills/<name>/
        SKILL.md
        scripts/main.py
        references/

The name is normalized to kebab-case. An existing skill directory is never
overwritten.

Usage:
    python scripts/init_skill.py my-api-client
    python scripts/init_skill.py "My API Client" --root path/to/project

Exit codes:
    0 - Skill created
    1 - Invalid name, or the skill directory already exists
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from skill_validation_common import ScaffoldError, fail, to_kebab_case

SKILLS_DIR = Path(".opencode") / "skills"

SKILL_TEMPLATE = """---
name: {name}
description: >
  [What this skill does]. Use when: (1) [First trigger scenario],
  (2) [Second trigger scenario], (3) [Third trigger scenario].
---

# {name}

[One-sentence summary of what this skill does.]

## Quick Start

[Most common operation - get users productive immediately]

```bash
python scripts/main.py <args>
```

## Workflow

**What are you trying to do?**

| Goal | Go to |
|------|-------|
| [First option] | Section A |
| [Second option] | Section B |

---

## Section A: [First Workflow]

### Steps

1. [First step]
2. [Second step]

---

## Section B: [Second Workflow]

### Steps

1. [First step]
2. [Second step]

---

## Scripts Reference

### main.py

[What it does]

```bash
python scripts/main.py <required-arg>
```
"""

SCRIPT_TEMPLATE = '''#!/usr/bin/env python3
"""
Main script for {name}

Usage:
    python scripts/main.py <args>
"""

import sys


def main() -> int:
    args = sys.argv[1:]
    if not args:
        print("Usage: python scripts/main.py <args>", file=sys.stderr)
        return 1

    print("Arguments:", args)
    return 0


if __name__ == "__main__":
    sys.exit(main())
'''


def create_skill(name: str, root: Path) -> Path:
    """Write the skill template under root and return the new skill directory.

    Raises:
        ScaffoldError: the name is empty after normalization, or the skill exists
    """
    skill_name = to_kebab_case(name)
    if not skill_name:
        raise ScaffoldError(f"Invalid skill name: {name!r}")

    skill_dir = root / SKILLS_DIR / skill_name
    if skill_dir.exists():
        raise ScaffoldError(f"Skill directory already exists: {skill_dir}")

    (skill_dir / "scripts").mkdir(parents=True)
    (skill_dir / "references").mkdir()

    (skill_dir / "SKILL.md").write_text(SKILL_TEMPLATE.format(name=skill_name), encoding="utf-8")
    (skill_dir / "scripts" / "main.py").write_text(SCRIPT_TEMPLATE.format(name=skill_name), encoding="utf-8")

    return skill_dir


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Create a new skill from the template")
    parser.add_argument("name", help="Skill name (normalized to kebab-case)")
    parser.add_argument("--root", type=Path, default=Path.cwd(), help="Project root (default: current directory)")
    args = parser.parse_args()

    try:
        skill_dir = create_skill(args.name, args.root)
    except ScaffoldError as exc:
        return fail(str(exc))

    print(f"Created skill: {skill_dir}")
    print("")
    print("Next steps:")
    print(f"  1. Edit {skill_dir / 'SKILL.md'}")
    print("     - Update the description with specific trigger scenarios")
    print("     - Fill in workflows and instructions")
    print("")
    print(f"  2. Implement {skill_dir / 'scripts' / 'main.py'}")
    print("")
    print(f"  3. Validate: python scripts/validate_skill.py {skill_dir}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
