from __future__ import annotations

from autocommit.config import CommitStrategy
from autocommit.ledger.formatting import format_full, format_oneline
from autocommit.ledger.util import iso_timestamp
from autocommit.models import ChangeType, Commit, CommitChange, FileCategory

TS = 1_700_000_000_000


def _commit(changes: tuple[CommitChange, ...], **overrides) -> Commit:
    data = dict(
        id="abcdef123456",
        project_id="game",
        timestamp=TS,
        message="Add player.gd",
        author="agent:test",
        changes=changes,
        strategy=CommitStrategy.IMMEDIATE,
    )
    data.update(overrides)
    return Commit(**data)


ADDED = CommitChange(
    path="player.gd", type=ChangeType.ADDED, category=FileCategory.SCRIPT, new_hash="n", size_delta=12
)
MODIFIED = CommitChange(
    path="main.tscn",
    type=ChangeType.MODIFIED,
    category=FileCategory.SCENE,
    old_hash="o",
    new_hash="n",
    size_delta=-4,
)
DELETED = CommitChange(
    path="old.png", type=ChangeType.DELETED, category=FileCategory.ASSET, old_hash="o", size_delta=-99
)


def test_iso_timestamp() -> None:
    assert iso_timestamp(TS) == "2023-11-14T22:13:20.000Z"
    assert iso_timestamp(TS + 5) == "2023-11-14T22:13:20.005Z"


def test_oneline_counts_changes() -> None:
    assert format_oneline(_commit((ADDED,))) == "abcdef1 Add player.gd (1 change)"
    assert format_oneline(_commit((ADDED, DELETED), message="Mixed")) == "abcdef1 Mixed (2 changes)"


def test_oneline_without_changes_has_no_suffix() -> None:
    assert format_oneline(_commit((), message="Empty")) == "abcdef1 Empty"


def test_full_root_commit() -> None:
    text = format_full(_commit((ADDED,)))

    assert text.splitlines() == [
        "commit abcdef123456",
        "Author:   agent:test",
        "Date:     2023-11-14T22:13:20.000Z",
        "Strategy: immediate",
        "",
        "    Add player.gd",
        "",
        "  Changes:",
        "    + [script] player.gd",
    ]


def test_full_with_parent_tags_and_all_change_types() -> None:
    commit = _commit(
        (ADDED, MODIFIED, DELETED),
        parent_id="123456abcdef",
        tags=("milestone", "v1"),
        strategy=CommitStrategy.BATCHED,
        message="Checkpoint",
    )

    lines = format_full(commit).splitlines()

    assert lines[:5] == [
        "commit abcdef123456",
        "Parent:   123456abcdef",
        "Author:   agent:test",
        "Date:     2023-11-14T22:13:20.000Z",
        "Strategy: batched",
    ]
    assert lines[5] == "Tags:     milestone, v1"
    assert lines[-3:] == [
        "    + [script] player.gd",
        "    M [scene] main.tscn (-4B)",
        "    - [asset] old.png",
    ]


def test_full_shows_zero_delta_on_modified() -> None:
    same_size = CommitChange(
        path="a.gd", type=ChangeType.MODIFIED, category=FileCategory.SCRIPT, size_delta=0
    )
    assert format_full(_commit((same_size,))).splitlines()[-1] == "    M [script] a.gd (+0B)"
