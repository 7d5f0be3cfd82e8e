"""Selection of the components that must be rebuilt."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


def select_components(
    components: Iterable[list[str]],
    changed: Iterable[str],
) -> list[list[str]]:
    """Return the components containing at least one changed source.

    Selection is by membership only. A component whose sources did not
    change is skipped even if a dependency in another component changed
    shape in an earlier run, and deleted paths never select a component.

    Args:
        components: Partition of the dependency graph
        changed: Paths added or modified in this run

    Returns:
        The selected components, in the order given.
    """
    changed_set = set(changed)
    return [
        component
        for component in components
        if any(path in changed_set for path in component)
    ]


__all__ = ["select_components"]
