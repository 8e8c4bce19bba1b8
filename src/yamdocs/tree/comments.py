"""Comment association: decides which node each comment documents.

Runs after parsing over the finished tree and the flat list of comments the
lexer recovered.  Every node is given an *anchor*: the position of its key
for mapping values, the ``-`` marker for block sequence items, or its own
start for flow sequence items and the root.

- A **leading** comment run is the block of own-line comments directly above
  an anchor line, with no blank line in between.
- A **trailing** comment follows code on a line.  It documents the node
  starting and ending on that line whose value ends nearest the comment
  (deepest on ties), else the node anchored there, else the deepest node
  whose value ends there.
- When several nodes are anchored on the same line, the leftmost one wins
  and ties go to the deepest node, so ``# doc`` above ``key: 1`` documents
  ``key`` rather than the mapping that contains it.

Each comment is attached to at most one node.  Comments that document
nothing become *free comments* of the innermost Mapping/Sequence whose lines
contain them, or of the document when no container does.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, replace

from yamdocs.span import Span
from yamdocs.tree.nodes import (
    Comment,
    CommentPosition,
    Mapping,
    MappingEntry,
    Node,
    Path,
    Scalar,
    Sequence,
)

__all__ = ["attach_comments"]


@dataclass(frozen=True, slots=True)
class _Slot:
    path: Path
    line: int
    column: int
    last_line: int
    end: int
    depth: int
    order: int


@dataclass(frozen=True, slots=True)
class _Container:
    path: Path
    first_line: int
    last_line: int
    depth: int


def _last_line(span: Span) -> int:
    """Line holding the last character of ``span``."""
    if span.end_column == 0 and span.end_line > span.start_line:
        return span.end_line - 1
    return span.end_line


def _collect(
    node: Node,
    path: Path,
    anchor: Span,
    depth: int,
    slots: list[_Slot],
    containers: list[_Container],
) -> None:
    slots.append(
        _Slot(
            path=path,
            line=anchor.start_line,
            column=anchor.start_column,
            last_line=max(_last_line(anchor), _last_line(node.span)),
            end=node.span.end_index,
            depth=depth,
            order=len(slots),
        )
    )
    match node:
        case Mapping(entries=entries, span=span):
            containers.append(
                _Container(path, span.start_line, _last_line(span), depth)
            )
            for entry in entries:
                _collect(
                    entry.value,
                    (*path, entry.key.key_name),
                    entry.key.span,
                    depth + 1,
                    slots,
                    containers,
                )
        case Sequence(items=items, span=span, markers=markers):
            containers.append(
                _Container(path, span.start_line, _last_line(span), depth)
            )
            for index, item in enumerate(items):
                anchor_span = markers[index] if markers else item.span
                _collect(item, (*path, index), anchor_span, depth + 1, slots, containers)
        case Scalar():
            pass


def _rebuild(
    node: Node,
    path: Path,
    attached: dict[Path, list[Comment]],
    free: dict[Path, list[Comment]],
) -> Node:
    comments = tuple(sorted(attached.get(path, ()), key=_source_order))
    match node:
        case Mapping(entries=entries):
            return replace(
                node,
                entries=tuple(
                    MappingEntry(
                        entry.key,
                        _rebuild(entry.value, (*path, entry.key.key_name), attached, free),
                    )
                    for entry in entries
                ),
                comments=comments,
                free_comments=tuple(sorted(free.get(path, ()), key=_source_order)),
            )
        case Sequence(items=items):
            return replace(
                node,
                items=tuple(
                    _rebuild(item, (*path, index), attached, free)
                    for index, item in enumerate(items)
                ),
                comments=comments,
                free_comments=tuple(sorted(free.get(path, ()), key=_source_order)),
            )
        case Scalar():
            return replace(node, comments=comments)


def _source_order(comment: Comment) -> int:
    return comment.span.start_index


def attach_comments(
    root: Node, comments: Iterable[Comment]
) -> tuple[Node, tuple[Comment, ...]]:
    """Attach comments to the nodes they document.

    Args:
        root:     Root of a parsed tree (not modified).
        comments: Every comment of the document, as recovered by the lexer.

    Returns:
        ``(new_root, document_free_comments)``: a rebuilt tree whose nodes
        carry their leading/trailing comments and free comments, plus the
        comments no container could hold.
    """
    slots: list[_Slot] = []
    containers: list[_Container] = []
    _collect(root, (), root.span, 0, slots, containers)

    # The node documented by comments around each anchor line.
    by_line: dict[int, _Slot] = {}
    for slot in slots:
        best = by_line.get(slot.line)
        if best is None or (slot.column, -slot.depth) < (best.column, -best.depth):
            by_line[slot.line] = slot

    own_line: dict[int, Comment] = {}
    inline: list[Comment] = []
    for comment in comments:
        if comment.own_line:
            own_line[comment.span.start_line] = comment
        else:
            inline.append(comment)

    attached: dict[Path, list[Comment]] = {}
    claimed: set[int] = set()

    for line, slot in sorted(by_line.items()):
        run: list[Comment] = []
        above = line - 1
        while above in own_line and own_line[above].span.start_index not in claimed:
            run.append(own_line[above])
            above -= 1
        for comment in reversed(run):
            claimed.add(comment.span.start_index)
            attached.setdefault(slot.path, []).append(
                replace(comment, position=CommentPosition.LEADING)
            )

    # Nodes that start and end on one line, by that line.
    single_line: dict[int, list[_Slot]] = {}
    for slot in slots:
        if slot.line == slot.last_line:
            single_line.setdefault(slot.line, []).append(slot)

    for comment in inline:
        line = comment.span.start_line
        if line in single_line:
            # The node whose value ends nearest the comment; ties go deeper.
            target = max(single_line[line], key=lambda s: (s.end, s.depth, s.order))
        else:
            target = by_line.get(line)
        if target is None:
            ending = [slot for slot in slots if slot.last_line == line]
            if ending:
                target = max(ending, key=lambda s: (s.depth, s.order))
        if target is None:
            continue
        claimed.add(comment.span.start_index)
        attached.setdefault(target.path, []).append(
            replace(comment, position=CommentPosition.TRAILING)
        )

    free: dict[Path, list[Comment]] = {}
    document_free: list[Comment] = []
    for comment in comments:
        if comment.span.start_index in claimed:
            continue
        line = comment.span.start_line
        holders = [c for c in containers if c.first_line <= line <= c.last_line]
        if holders:
            holder = max(holders, key=lambda c: c.depth)
            free.setdefault(holder.path, []).append(comment)
        elif containers:
            free.setdefault((), []).append(comment)
        else:
            document_free.append(comment)

    return _rebuild(root, (), attached, free), tuple(document_free)
