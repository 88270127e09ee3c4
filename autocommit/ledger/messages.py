"""Human-readable commit messages generated from a change set."""

from __future__ import annotations

from typing import Sequence

from ..models import ChangeType, CommitChange, FileCategory

_VERBS = (
    (ChangeType.ADDED, "Add"),
    (ChangeType.MODIFIED, "Update"),
    (ChangeType.DELETED, "Remove"),
)


def _clause(verb: str, group: list[CommitChange]) -> str:
    if len(group) == 1:
        return f"{verb} {group[0].path}"
    categories = {c.category for c in group}
    if len(categories) == 1:
        (category,) = categories
        if category != FileCategory.UNKNOWN:
            return f"{verb} {len(group)} {category.value} files"
    return f"{verb} {len(group)} files"


def generate_commit_message(changes: Sequence[CommitChange]) -> str:
    """
    Summarize changes as e.g. "Add player.gd, Update 3 scene files".

    Groups appear in added, modified, deleted order.
    """
    if not changes:
        return "No changes"

    parts: list[str] = []
    for change_type, verb in _VERBS:
        group = [c for c in changes if c.type == change_type]
        if group:
            parts.append(_clause(verb, group))
    return ", ".join(parts)
