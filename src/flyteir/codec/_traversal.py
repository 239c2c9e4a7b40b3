"""Iterative post-order fold used by the recursive codecs.

Literals, binding data and literal types nest without a depth limit, so the codecs
walk them with an explicit work stack instead of Python recursion.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

N = TypeVar("N")
R = TypeVar("R")


def fold(
    root: N,
    children: Callable[[N], Sequence[N]],
    combine: Callable[[N, list[R]], R],
) -> R:
    """Combine ``root`` bottom-up.

    ``children(node)`` is called once per node before any of its children are visited;
    ``combine(node, results)`` receives the children's results in ``children`` order.
    """
    results: list[R] = []
    stack: list[tuple[N, Sequence[N] | None]] = [(root, None)]
    while stack:
        node, kids = stack.pop()
        if kids is None:
            kids = children(node)
            stack.append((node, kids))
            stack.extend((child, None) for child in reversed(kids))
            continue
        count = len(kids)
        gathered = results[len(results) - count :]
        del results[len(results) - count :]
        results.append(combine(node, gathered))
    return results[0]


__all__ = ["fold"]
