"""Group operations into named buckets for display.

Every ``(path, method, operation)`` triple lands in at least one group:

* an operation with tags appears once under *each* distinct tag it lists
  (fan-out, not a single canonical group);
* an untagged operation gets one synthetic tag from the first segment of its
  path (``/orders/{id}`` -> ``orders``), or ``"default"`` when the path has
  no leading segment.

Groups keep first-appearance order and entries keep document order (paths
first, then methods within a path), so grouping the same document twice
gives identical results.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Mapping
from typing import Optional

from clearapi.models import Document, HTTPMethod, Operation, OperationEntry

DEFAULT_TAG = "default"


def derive_tag(path: str) -> str:
    """Derive a group name from the first segment of *path*.

    The segment is the text after one leading ``/`` up to the next ``/``
    (or to the end when there is none).

    Example::

        >>> derive_tag("/orders/{id}")
        'orders'
        >>> derive_tag("/health")
        'health'
        >>> derive_tag("/")
        'default'
    """
    trimmed = path[1:] if path.startswith("/") else path
    segment = trimmed.split("/", 1)[0]
    return segment or DEFAULT_TAG


def operation_tags(path: str, operation: Operation) -> list[str]:
    """The groups *operation* belongs to, in the order it lists them."""
    tags: list[str] = []
    for tag in operation.tags:
        if tag.strip() and tag not in tags:
            tags.append(tag)
    return tags or [derive_tag(path)]


def group_operations(
    paths: Mapping[str, Mapping[HTTPMethod, Operation]],
) -> dict[str, list[OperationEntry]]:
    """Partition every operation in *paths* into tag groups.

    Args:
        paths: ``Document.paths`` -- path template to ``{method: Operation}``.

    Returns:
        A mapping of group name to its ordered
        :class:`~clearapi.models.OperationEntry` list.

    Example::

        groups = group_operations(document.paths)
        for tag, entries in groups.items():
            print(tag, [f"{e.method.value.upper()} {e.path}" for e in entries])
    """
    groups: dict[str, list[OperationEntry]] = defaultdict(list)

    for path, methods in paths.items():
        for method, operation in methods.items():
            entry = OperationEntry(path=path, method=method, operation=operation)
            for tag in operation_tags(path, operation):
                groups[tag].append(entry)

    return dict(groups)


def operation_count(groups: Mapping[str, list[OperationEntry]]) -> int:
    """Count distinct ``(path, method)`` pairs across all groups."""
    return len({(e.path, e.method) for entries in groups.values() for e in entries})


def find_operation(document: Document, method: str, path: str) -> Optional[OperationEntry]:
    """Look up a single operation by method (case-insensitive) and path template.

    Returns:
        The matching entry, or ``None`` when the path or method is absent.
    """
    try:
        http_method = HTTPMethod(method.lower())
    except ValueError:
        return None

    methods = document.paths.get(path)
    if methods is None or http_method not in methods:
        return None
    return OperationEntry(path=path, method=http_method, operation=methods[http_method])
