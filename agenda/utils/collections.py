"""Small helpers over lists of mappings."""

from collections import defaultdict
from collections.abc import Iterable, Mapping
from typing import Any


def group_by(items: Iterable[Mapping[str, Any]], key: str) -> dict[str, list[Mapping[str, Any]]]:
    """Group items by the string form of ``item[key]``."""
    groups: dict[str, list[Mapping[str, Any]]] = defaultdict(list)
    for item in items:
        groups[str(item[key])].append(item)
    return dict(groups)


def count_by(items: Iterable[Mapping[str, Any]], key: str) -> dict[str, int]:
    """Count items per string form of ``item[key]``."""
    return {group: len(members) for group, members in group_by(items, key).items()}


def unique_by(items: Iterable[Mapping[str, Any]], key: str) -> list[Mapping[str, Any]]:
    """Keep the first item for each value of ``item[key]``."""
    seen = set()
    result = []
    for item in items:
        value = item[key]
        if value in seen:
            continue
        seen.add(value)
        result.append(item)
    return result


def sort_by(
    items: Iterable[Mapping[str, Any]], key: str, order: str = "asc"
) -> list[Mapping[str, Any]]:
    """Stable sort on ``item[key]``."""
    return sorted(items, key=lambda item: item[key], reverse=order == "desc")
