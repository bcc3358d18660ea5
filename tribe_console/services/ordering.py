"""Full-list reorder helper shared by roles, ranks and role-rank bindings."""

from typing import Dict, Iterable, List

from tribe_console.core.exceptions import ValidationError


def clean_ids(ids: Iterable[str]) -> List[str]:
    """Strip the supplied ids and reject duplicates."""
    cleaned = [str(i).strip() for i in ids if i is not None and str(i).strip()]
    if len(set(cleaned)) != len(cleaned):
        raise ValidationError("Reorder list contains duplicate ids.")
    return cleaned


def apply_order(rows_by_id: Dict[str, object], ordered_ids: List[str]) -> int:
    """Set ``sort_order = position`` (1-based) on each row named in ``ordered_ids``.

    Ids with no row in ``rows_by_id`` are skipped; rows not named keep their
    current sort order. Returns the number of rows updated.
    """
    updated = 0
    for position, row_id in enumerate(ordered_ids, start=1):
        row = rows_by_id.get(row_id)
        if row is None:
            continue
        row.sort_order = position
        updated += 1
    return updated
