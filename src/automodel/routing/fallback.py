"""Fallback chain construction."""

from collections.abc import Iterable

from automodel.core.types import ModelId


def build_fallback_chain(
    selection: Iterable[ModelId],
    extra: Iterable[ModelId] = (),
) -> list[ModelId]:
    """Build the ordered chain a host should try, primary first.

    The resolved selection keeps its order. The configured global fallback
    chain is appended after it, skipping identifiers already present.
    """
    chain: list[ModelId] = []
    seen: set[ModelId] = set()
    for model in (*selection, *extra):
        if model not in seen:
            seen.add(model)
            chain.append(model)
    return chain
