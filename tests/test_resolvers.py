"""
Tests for the pure authorization, visibility and rank resolvers.

No database: ranks and bindings are transient model instances.
"""

import pytest

from tribe_console.core.exceptions import ResourceNotFoundError
from tribe_console.models.rank import Rank, RoleRank
from tribe_console.services.resolvers import (
    can_perform,
    compose_available_ranks,
    is_readable,
    label_for,
    visibility_default,
)


def _rank(rank_id, name, sort_order, role_id=None):
    return Rank(id=rank_id, name=name, sort_order=sort_order, role_id=role_id)


@pytest.fixture
def pool():
    return [
        _rank("r-nov", "Novice", 1),
        _rank("r-jou", "Journeyman", 2),
        _rank("r-vet", "Veteran", 3),
        _rank("r-exp", "Expert", 4),
    ]


class TestCanPerform:
    """Access-list membership check."""

    def test_role_on_list(self):
        assert can_perform("Chief", ["Chief", "Elder"]) is True

    def test_role_not_on_list(self):
        assert can_perform("Builder", ["Chief", "Elder"]) is False

    def test_missing_access_list_denies(self):
        assert can_perform("Chief", None) is False

    def test_anonymous_denied(self):
        assert can_perform(None, ["Chief"]) is False
        assert can_perform("   ", ["Chief"]) is False

    def test_role_name_is_trimmed(self):
        assert can_perform(" Chief ", ["Chief"]) is True

    def test_empty_list_denies_everyone(self):
        assert can_perform("Chief", []) is False


class TestVisibility:
    """Anonymous readability of the members and roles areas."""

    def test_defaults(self):
        assert visibility_default("members") is True
        assert visibility_default("roles") is False

    def test_unknown_area(self):
        with pytest.raises(ResourceNotFoundError):
            visibility_default("ledger")

    def test_unset_roles_blocks_anonymous(self):
        assert is_readable("roles", None, is_authenticated=False) is False
        assert is_readable("roles", None, is_authenticated=True) is True

    def test_unset_members_is_public(self):
        assert is_readable("members", None, is_authenticated=False) is True

    def test_stored_flag_wins_over_default(self):
        assert is_readable("roles", True, is_authenticated=False) is True
        assert is_readable("members", False, is_authenticated=False) is False

    def test_authenticated_always_reads(self):
        assert is_readable("members", False, is_authenticated=True) is True


class TestComposeAvailableRanks:
    """Ranks a role can offer its members."""

    def test_no_bindings_uses_global_pool(self, pool):
        ranks = compose_available_ranks("role-b", pool, [])
        assert [r.name for r in ranks] == ["Novice", "Journeyman", "Veteran", "Expert"]

    def test_bindings_select_and_order(self, pool):
        bindings = [
            RoleRank(role_id="role-e", rank_id="r-exp", sort_order=1),
            RoleRank(role_id="role-e", rank_id="r-vet", sort_order=2),
        ]
        ranks = compose_available_ranks("role-e", pool, bindings)
        assert [r.name for r in ranks] == ["Expert", "Veteran"]

    def test_other_roles_bindings_ignored(self, pool):
        bindings = [RoleRank(role_id="role-x", rank_id="r-vet", sort_order=1)]
        ranks = compose_available_ranks("role-b", pool, bindings)
        assert len(ranks) == 4

    def test_scoped_ranks_appended_after_pool(self, pool):
        scoped = [
            _rank("s-2", "Foreman", 2, role_id="role-b"),
            _rank("s-1", "Apprentice", 1, role_id="role-b"),
            _rank("s-x", "Scout", 1, role_id="role-x"),
        ]
        ranks = compose_available_ranks("role-b", pool + scoped, [])
        assert [r.name for r in ranks][-2:] == ["Apprentice", "Foreman"]
        assert "Scout" not in [r.name for r in ranks]

    def test_scoped_ranks_appended_after_bindings(self, pool):
        scoped = [_rank("s-1", "Apprentice", 1, role_id="role-b")]
        bindings = [RoleRank(role_id="role-b", rank_id="r-nov", sort_order=1)]
        ranks = compose_available_ranks("role-b", pool + scoped, bindings)
        assert [r.name for r in ranks] == ["Novice", "Apprentice"]

    def test_bound_scoped_rank_not_repeated(self, pool):
        scoped = [_rank("s-1", "Apprentice", 1, role_id="role-b")]
        bindings = [
            RoleRank(role_id="role-b", rank_id="s-1", sort_order=1),
            RoleRank(role_id="role-b", rank_id="r-nov", sort_order=2),
        ]
        ranks = compose_available_ranks("role-b", pool + scoped, bindings)
        assert [r.name for r in ranks] == ["Apprentice", "Novice"]

    def test_ties_broken_by_name(self):
        pool = [_rank("a", "Zeta", 1), _rank("b", "Alpha", 1)]
        ranks = compose_available_ranks("role-b", pool, [])
        assert [r.name for r in ranks] == ["Alpha", "Zeta"]


class TestLabelFor:
    """Per-role display names of ranks."""

    def test_override_applies_to_its_role_only(self):
        veteran = _rank("r-vet", "Veteran", 3)
        overrides = {("role-elder", "r-vet"): "Senior Veteran"}
        assert label_for("role-elder", veteran, overrides) == "Senior Veteran"
        assert label_for("role-builder", veteran, overrides) == "Veteran"

    def test_no_role_uses_rank_name(self):
        veteran = _rank("r-vet", "Veteran", 3)
        assert label_for(None, veteran, {(None, "r-vet"): "x"}) == "Veteran"

    def test_scoped_rank_never_overridden(self):
        scoped = _rank("s-1", "Apprentice", 1, role_id="role-b")
        assert label_for("role-b", scoped, {("role-b", "s-1"): "x"}) == "Apprentice"
