"""Reviewer prompt rendering."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from reviewplane.diff.models import ChangeBlock, ReviewFile
from reviewplane.walkthrough.models import BlockRef

if TYPE_CHECKING:
    from reviewplane.review.models import PullRequest

_RULES = """\
Rules:
- Read files directly from disk using repo-relative paths.
- Only use git-tracked files (ignore untracked/build/vendor).
- You may use git and ripgrep to locate relevant code.
- Do not invent files, APIs, or behavior not present in the repo.
- Refer to change blocks by file path and the 0-based index from their
  "@@ change_block N @@" marker."""

_OUTPUT_FORMAT = """\
Return ONLY valid JSON (no markdown, no extra text):
{
  "overview": "1-3 short paragraphs",
  "steps": [
    {
      "title": "Short step title",
      "explanation": "1-4 sentences",
      "change_blocks": [
        { "file": "path/to/file", "change_block_index": 0 }
      ]
    }
  ]
}"""

PROMPT_TEMPLATE = """\
You are an AI assistant running inside a git repository at: {root}

Walk a human reviewer through the changes below. Provide a concise overview
and an ordered walkthrough. Steps should build understanding progressively:
new abstractions first, then the core logic, removals, tests, wiring and
finally imports.

{rules}

Every change block listed below must be referenced by at least one step.

PR Title: {title}

PR Description:
{description}

Files Changed:
{file_list}

Unified Diff:
{diff}

{output_format}
"""

MISSING_PROMPT_TEMPLATE = """\
You are an AI assistant running inside a git repository at: {root}

An earlier walkthrough of this change set skipped the change blocks below.
Write additional walkthrough steps that cover every one of them. Do not
repeat steps for blocks that are not listed.

{rules}

PR Title: {title}

Uncovered change blocks:
{diff}

{output_format}
"""


def build_file_list(files: Sequence[ReviewFile]) -> str:
    return "\n".join(f.summary for f in files)


def render_block(block: ChangeBlock, index: int, content_lines: Sequence[str] | None) -> str:
    """Render one block as its marker followed by ``-``, ``+`` and context lines.

    Deleted lines precede the added line at the same position. Without file
    content, added and context lines are placeholders carrying their line
    numbers.
    """
    deleted_at: dict[int, list[str]] = {}
    for group in block.deletion_groups:
        deleted_at.setdefault(group.anchor_line, []).extend(group.old_lines)
    added = set(block.added_lines)

    def text(line: int, placeholder: str) -> str:
        if content_lines is not None and 1 <= line <= len(content_lines):
            return content_lines[line - 1]
        return f"<{placeholder} line {line}>"

    out = [f"@@ change_block {index} @@"]
    for line in range(block.start_line, block.end_line + 1):
        removed = deleted_at.get(line, [])
        out.extend(f"-{old}" for old in removed)
        if line in added:
            out.append(f"+{text(line, 'added')}")
        elif not removed:
            out.append(f" {text(line, 'context')}")
    return "\n".join(out)


def build_diff(files: Sequence[ReviewFile], only: Collection[BlockRef] | None = None) -> str:
    """Unified-diff-like rendering of change blocks, optionally restricted."""
    parts: list[str] = []
    for file in files:
        indices = [
            i
            for i in range(len(file.change_blocks))
            if only is None or BlockRef(file.path, i) in only
        ]
        if not indices:
            continue
        lines = file.content.splitlines() if file.content is not None else None
        parts.append(f"--- a/{file.path}\n+++ b/{file.path}")
        parts.extend(render_block(file.change_blocks[i], i, lines) for i in indices)
    return "\n\n".join(parts)


def _pr_fields(pr: PullRequest | None) -> tuple[str, str]:
    if pr is None:
        return "Local changes", "(No description provided)"
    return pr.title or "Unknown", pr.description or "(No description provided)"


def build_prompt(
    files: Sequence[ReviewFile],
    *,
    git_root: Path | str,
    pr: PullRequest | None = None,
) -> str:
    title, description = _pr_fields(pr)
    return PROMPT_TEMPLATE.format(
        root=git_root,
        rules=_RULES,
        title=title,
        description=description,
        file_list=build_file_list(files),
        diff=build_diff(files),
        output_format=_OUTPUT_FORMAT,
    )


def build_missing_prompt(
    files: Sequence[ReviewFile],
    missing: Collection[BlockRef],
    *,
    git_root: Path | str,
    pr: PullRequest | None = None,
) -> str:
    """Follow-up prompt carrying only the uncovered blocks, original indices kept."""
    title, _ = _pr_fields(pr)
    return MISSING_PROMPT_TEMPLATE.format(
        root=git_root,
        rules=_RULES,
        title=title,
        diff=build_diff(files, only=frozenset(missing)),
        output_format=_OUTPUT_FORMAT,
    )
