from __future__ import annotations

from functools import cmp_to_key
from typing import Any, Iterable, Sequence

from digest_builder_core.util import parse_calendar_date


def _importance(entry: Any) -> int:
    return getattr(entry, "importance", None) or 2


def _cmp(a: Any, b: Any) -> int:
    ia, ib = _importance(a), _importance(b)
    if ia != ib:
        return -1 if ia < ib else 1

    da = getattr(a, "date", "") or ""
    db = getattr(b, "date", "") or ""
    if da and db and da != db:
        pa, pb = parse_calendar_date(da), parse_calendar_date(db)
        # Unparseable dates fall through to the title key.
        if pa is not None and pb is not None and pa != pb:
            return -1 if pa > pb else 1

    ta = getattr(a, "title", "") or ""
    tb = getattr(b, "title", "") or ""
    ka, kb = (ta.casefold(), ta), (tb.casefold(), tb)
    if ka == kb:
        return 0
    return -1 if ka < kb else 1


def sort_entries(entries: Iterable[Any]) -> list[Any]:
    """
    Display/export order: importance 1 first, then newest date, then title.

    Returns a new list; `sorted` is stable so full ties keep input order.
    """
    return sorted(entries, key=cmp_to_key(_cmp))


def sorted_section_entries(sections: Sequence[Any]) -> list[tuple[Any, list[Any]]]:
    return [(s, sort_entries(s.entries)) for s in sections if s.entries]
