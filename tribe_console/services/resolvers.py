"""Authorization, visibility and rank resolvers.

Pure functions over snapshots already fetched from the database. They hold
no state and never query; the services load the rows and call into here.
"""

from typing import Iterable, List, Mapping, Optional, Tuple

from tribe_console.core.exceptions import ResourceNotFoundError
from tribe_console.models.rank import Rank, RoleRank

# Anonymous readability when no visibility row exists.
AREA_DEFAULTS = {
    "members": True,
    "roles": False,
}


def visibility_default(area: str) -> bool:
    """Default public flag for ``area``; unknown areas are not found."""
    if area not in AREA_DEFAULTS:
        raise ResourceNotFoundError(f"Unknown visibility area '{area}'")
    return AREA_DEFAULTS[area]


def is_readable(area: str, is_public: Optional[bool], is_authenticated: bool) -> bool:
    """Whether a list read of ``area`` is allowed.

    ``is_public`` is the stored setting, or None when no row exists.
    """
    if is_public is None:
        is_public = visibility_default(area)
    return bool(is_public) or is_authenticated


def can_perform(actor_role_name: Optional[str], granted_roles: Optional[Iterable[str]]) -> bool:
    """Whether a role is on an access list.

    ``granted_roles`` is the list's role-name set, or None when the access
    list does not exist. Anonymous callers never pass.
    """
    if granted_roles is None:
        return False
    role_name = (actor_role_name or "").strip()
    if not role_name:
        return False
    return role_name in set(granted_roles)


def rank_sort_key(rank: Rank) -> Tuple[int, str, str]:
    return (rank.sort_order or 0, rank.name or "", rank.id or "")


def compose_available_ranks(
    role_id: str,
    ranks: Iterable[Rank],
    bindings: Iterable[RoleRank],
) -> List[Rank]:
    """Ranks selectable for members of ``role_id``, in display order.

    With no bindings the role uses the whole global pool in canonical order.
    With bindings it uses exactly the bound ranks, ordered by the binding's
    own sort order. The role's scoped ranks are always available and follow
    whatever the bindings produced.
    """
    ranks = list(ranks)
    by_id = {rank.id: rank for rank in ranks}
    role_bindings = [b for b in bindings if b.role_id == role_id]

    if not role_bindings:
        selected = sorted((r for r in ranks if r.role_id is None), key=rank_sort_key)
    else:
        selected = []
        ordered = sorted(
            (b for b in role_bindings if b.rank_id in by_id),
            key=lambda b: (b.sort_order or 0, by_id[b.rank_id].name or "", b.rank_id),
        )
        for binding in ordered:
            rank = by_id[binding.rank_id]
            # a binding may only point at a global rank or one of this role's own
            if rank.role_id is None or rank.role_id == role_id:
                selected.append(rank)

    seen = {rank.id for rank in selected}
    own = sorted((r for r in ranks if r.role_id == role_id), key=rank_sort_key)
    selected.extend(rank for rank in own if rank.id not in seen)
    return selected


def label_for(
    role_id: Optional[str],
    rank: Rank,
    overrides: Mapping[Tuple[str, str], str],
) -> str:
    """Display name of ``rank`` when held under ``role_id``.

    Overrides are keyed by ``(role_id, rank_id)`` and only ever apply to
    global ranks.
    """
    if rank.role_id is not None:
        return rank.name
    if role_id is None:
        return rank.name
    return overrides.get((role_id, rank.id), rank.name)
