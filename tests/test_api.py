"""
HTTP contract tests: status codes, access gating, visibility and camelCase payloads.
"""

from tribe_console.models.visibility import VisibilitySetting
from tribe_console.services.role_service import RoleService


# ============================================================================
# Roles
# ============================================================================

class TestRolesApi:
    """Role endpoints."""

    def test_anonymous_cannot_list_roles_by_default(self, client, anon_headers):
        resp = client.get("/roles", headers=anon_headers)
        assert resp.status_code == 401
        assert resp.json()["detail"]

    def test_signed_in_lists_roles_in_order(self, client, elder_headers):
        resp = client.get("/roles", headers=elder_headers)
        assert resp.status_code == 200
        roles = resp.json()
        assert roles[0]["name"] == "Chief"
        assert [r["sortOrder"] for r in roles] == sorted(r["sortOrder"] for r in roles)

    def test_elder_cannot_create_role(self, client, elder_headers):
        resp = client.post("/roles", json={"name": "Scribe"}, headers=elder_headers)
        assert resp.status_code == 403
        assert resp.json() == {"detail": "Insufficient access."}

    def test_anonymous_create_is_unauthorized(self, client):
        resp = client.post("/roles", json={"name": "Scribe"}, headers={"X-Module-Role": "Chief"})
        assert resp.status_code == 401
        assert resp.json() == {"detail": "Authentication required."}

    def test_chief_creates_role_last(self, client, chief_headers):
        resp = client.post("/roles", json={"name": "Scribe", "description": "Keeps records"}, headers=chief_headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["name"] == "Scribe"
        assert body["sortOrder"] == 11

        roles = client.get("/roles", headers=chief_headers).json()
        assert roles[-1]["id"] == body["id"]

    def test_duplicate_role_conflicts(self, client, chief_headers):
        resp = client.post("/roles", json={"name": "Chief"}, headers=chief_headers)
        assert resp.status_code == 409

    def test_unique_name_race_is_conflict(self, client, chief_headers, monkeypatch):
        # another request inserted the same name between the check and the insert
        monkeypatch.setattr(RoleService, "get_by_name", staticmethod(lambda db, name: None))
        resp = client.post("/roles", json={"name": "Chief"}, headers=chief_headers)
        assert resp.status_code == 409
        assert resp.json() == {"detail": "Conflicts with an existing record."}

    def test_blank_role_name(self, client, chief_headers):
        resp = client.post("/roles", json={"name": "  "}, headers=chief_headers)
        assert resp.status_code == 400

    def test_reorder_roles(self, client, chief_headers):
        ids = [r["id"] for r in client.get("/roles", headers=chief_headers).json()]
        wanted = [ids[2], ids[0], ids[1]] + ids[3:]

        resp = client.patch("/roles/order", json={"roleIds": wanted}, headers=chief_headers)
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "detail": {"updated": len(ids)}}

        roles = client.get("/roles", headers=chief_headers).json()
        assert [r["id"] for r in roles] == wanted

    def test_reorder_with_duplicates(self, client, chief_headers):
        ids = [r["id"] for r in client.get("/roles", headers=chief_headers).json()]
        resp = client.patch("/roles/order", json={"roleIds": [ids[0], ids[0]]}, headers=chief_headers)
        assert resp.status_code == 400

    def test_update_and_delete_role(self, client, chief_headers):
        role = client.post("/roles", json={"name": "Scribe"}, headers=chief_headers).json()

        resp = client.patch(f"/roles/{role['id']}", json={"name": "Archivist"}, headers=chief_headers)
        assert resp.status_code == 200
        assert resp.json()["name"] == "Archivist"
        assert resp.json()["sortOrder"] == role["sortOrder"]

        assert client.delete(f"/roles/{role['id']}", headers=chief_headers).json() == {"ok": True, "detail": None}
        assert client.delete(f"/roles/{role['id']}", headers=chief_headers).status_code == 404

    def test_available_ranks(self, client, lookup, chief_headers):
        elder_id = lookup.role("Elder").id
        resp = client.get(f"/roles/{elder_id}/available-ranks", headers=chief_headers)
        assert resp.status_code == 200
        assert [r["name"] for r in resp.json()] == ["Veteran", "Expert", "Master"]
        assert resp.json()[0]["roleId"] is None


# ============================================================================
# Ranks, bindings, overrides
# ============================================================================

class TestRanksApi:
    """Rank, role-rank and override endpoints."""

    def test_create_scoped_rank(self, client, lookup, chief_headers):
        builder_id = lookup.role("Builder").id
        resp = client.post("/ranks", json={"name": "Foreman", "roleId": builder_id}, headers=chief_headers)
        assert resp.status_code == 201
        assert resp.json()["roleId"] == builder_id

        listed = client.get("/ranks", params={"roleId": builder_id}, headers=chief_headers).json()
        assert [r["name"] for r in listed] == ["Foreman"]

    def test_rank_writes_need_manage_roles(self, client, elder_headers):
        assert client.post("/ranks", json={"name": "Warlord"}, headers=elder_headers).status_code == 403

    def test_set_role_ranks(self, client, lookup, chief_headers):
        elder_id = lookup.role("Elder").id
        master_id = lookup.rank("Master").id
        resp = client.patch(f"/role-ranks/{elder_id}", json={"rankIds": [master_id]}, headers=chief_headers)
        assert resp.status_code == 200
        assert resp.json() == [{"roleId": elder_id, "rankId": master_id, "sortOrder": 1}]

        bindings = client.get("/role-ranks").json()
        assert [b["rankId"] for b in bindings if b["roleId"] == elder_id] == [master_id]

    def test_reorder_role_ranks(self, client, lookup, chief_headers):
        elder_id = lookup.role("Elder").id
        order = [lookup.rank(n).id for n in ("Master", "Expert", "Veteran")]
        resp = client.patch(f"/role-ranks/order/{elder_id}", json={"rankIds": order}, headers=chief_headers)
        assert resp.json()["detail"] == {"updated": 3}

        ranks = client.get(f"/roles/{elder_id}/available-ranks", headers=chief_headers).json()
        assert [r["id"] for r in ranks] == order

    def test_overrides(self, client, lookup, chief_headers):
        elder_id = lookup.role("Elder").id
        veteran_id = lookup.rank("Veteran").id
        resp = client.patch(
            f"/role-rank-overrides/{elder_id}",
            json={"overrides": [{"rankId": veteran_id, "name": "Senior Veteran"}]},
            headers=chief_headers,
        )
        assert resp.status_code == 200
        assert resp.json() == [{"roleId": elder_id, "rankId": veteran_id, "name": "Senior Veteran"}]
        assert client.get("/role-rank-overrides").json() == resp.json()


# ============================================================================
# Visibility
# ============================================================================

class TestVisibilityApi:
    """Anonymous read gating."""

    def test_unset_roles_area_defaults_to_private(self, client, seeded, anon_headers, chief_headers):
        seeded.query(VisibilitySetting).delete()
        seeded.commit()

        assert client.get("/roles", headers=anon_headers).status_code == 401
        assert client.get("/members", headers=anon_headers).status_code == 200
        assert client.get("/visibility").json() == [
            {"area": "members", "isPublic": True},
            {"area": "roles", "isPublic": False},
        ]

        resp = client.patch("/visibility/roles", json={"isPublic": True}, headers=chief_headers)
        assert resp.status_code == 200
        assert resp.json() == {"area": "roles", "isPublic": True}
        assert client.get("/roles", headers=anon_headers).status_code == 200

    def test_members_can_be_made_private(self, client, anon_headers, chief_headers, elder_headers):
        client.patch("/visibility/members", json={"isPublic": False}, headers=chief_headers)
        assert client.get("/members", headers=anon_headers).status_code == 401
        assert client.get("/members", headers=elder_headers).status_code == 200

    def test_unknown_area_is_not_found(self, client, anon_headers, chief_headers):
        assert client.patch("/visibility/ledger", json={"isPublic": True}, headers=anon_headers).status_code == 404
        assert client.patch("/visibility/ledger", json={"isPublic": True}, headers=chief_headers).status_code == 404

    def test_toggle_needs_manage_roles(self, client, anon_headers, elder_headers):
        assert client.patch("/visibility/roles", json={"isPublic": True}, headers=anon_headers).status_code == 401
        assert client.patch("/visibility/roles", json={"isPublic": True}, headers=elder_headers).status_code == 403


# ============================================================================
# Members
# ============================================================================

class TestMembersApi:
    """Member endpoints with camelCase payloads."""

    def _body(self, lookup, **overrides):
        veteran_id = lookup.rank("Veteran").id
        body = {
            "displayName": "Kellan Rye",
            "status": "active",
            "walletAddress": "0x51a2...0fdc",
            "roles": ["Elder", "Builder"],
            "globalRankId": veteran_id,
            "roleRanks": [
                {"role": "Elder", "rankId": veteran_id},
                {"role": "Gatherer", "rankId": lookup.rank("Novice").id},
            ],
        }
        body.update(overrides)
        return body

    def test_elder_creates_member(self, client, lookup, elder_headers):
        resp = client.post("/members", json=self._body(lookup), headers=elder_headers)
        assert resp.status_code == 201
        member = resp.json()
        assert member["displayName"] == "Kellan Rye"
        assert member["walletAddress"] == "0x51a2...0fdc"
        assert member["roles"] == ["Elder", "Builder"]
        assert member["globalRank"]["name"] == "Veteran"
        assert member["roleRanks"] == [
            {"role": "Elder", "rank": "Veteran", "rankId": lookup.rank("Veteran").id},
        ]

    def test_override_label_in_listing(self, client, lookup, chief_headers, anon_headers):
        elder_id = lookup.role("Elder").id
        veteran_id = lookup.rank("Veteran").id
        client.patch(
            f"/role-rank-overrides/{elder_id}",
            json={"overrides": [{"rankId": veteran_id, "name": "Senior Veteran"}]},
            headers=chief_headers,
        )
        client.post("/members", json=self._body(lookup), headers=chief_headers)

        members = client.get("/members", headers=anon_headers).json()
        assert members[0]["roleRanks"][0]["rank"] == "Senior Veteran"
        assert members[0]["globalRank"]["name"] == "Veteran"

    def test_builder_cannot_create_member(self, client, lookup):
        headers = {"X-Module-Auth": "true", "X-Module-Role": "Builder"}
        assert client.post("/members", json=self._body(lookup), headers=headers).status_code == 403

    def test_scoped_global_rank_rejected(self, client, lookup, chief_headers):
        foreman = client.post(
            "/ranks", json={"name": "Foreman", "roleId": lookup.role("Builder").id}, headers=chief_headers,
        ).json()
        resp = client.post("/members", json=self._body(lookup, globalRankId=foreman["id"]), headers=chief_headers)
        assert resp.status_code == 400
        assert client.get("/members", headers=chief_headers).json() == []

    def test_update_get_delete(self, client, lookup, chief_headers):
        member = client.post("/members", json=self._body(lookup), headers=chief_headers).json()

        resp = client.patch(
            f"/members/{member['id']}",
            json={"displayName": "Kellan Rye", "status": "pending", "roles": ["Builder"]},
            headers=chief_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["roles"] == ["Builder"]
        assert resp.json()["roleRanks"] == []
        assert resp.json()["globalRank"] is None

        assert client.get(f"/members/{member['id']}", headers=chief_headers).json()["status"] == "pending"
        assert client.delete(f"/members/{member['id']}", headers=chief_headers).status_code == 200
        assert client.get(f"/members/{member['id']}", headers=chief_headers).status_code == 404


# ============================================================================
# Access lists and checks
# ============================================================================

class TestAccessApi:
    """Access-list management and the check endpoint."""

    def test_list_requires_sign_in(self, client, anon_headers, elder_headers):
        assert client.get("/access-lists", headers=anon_headers).status_code == 401
        lists = client.get("/access-lists", headers=elder_headers).json()
        manage_roles = next(a for a in lists if a["name"] == "manage_roles")
        assert manage_roles["roles"] == ["Chief"]

    def test_check(self, client, chief_headers, elder_headers, anon_headers):
        resp = client.get("/access/check", params={"accessList": "manage_roles"}, headers=chief_headers)
        assert resp.json() == {"role": "Chief", "accessList": "manage_roles", "allowed": True}
        resp = client.get("/access/check", params={"accessList": "manage_roles"}, headers=elder_headers)
        assert resp.json()["allowed"] is False
        resp = client.get("/access/check", params={"accessList": "manage_roles"}, headers=anon_headers)
        assert resp.json()["allowed"] is False

    def test_granting_access_list(self, client, chief_headers, elder_headers):
        resp = client.post(
            "/access-lists", json={"name": "manage_raids", "roles": ["Elder"]}, headers=chief_headers,
        )
        assert resp.status_code == 201
        check = client.get("/access/check", params={"accessList": "manage_raids"}, headers=elder_headers)
        assert check.json()["allowed"] is True

        client.patch(
            f"/access-lists/{resp.json()['id']}", json={"name": "manage_raids", "roles": []}, headers=chief_headers,
        )
        check = client.get("/access/check", params={"accessList": "manage_raids"}, headers=elder_headers)
        assert check.json()["allowed"] is False

    def test_elder_cannot_edit_access_lists(self, client, elder_headers):
        assert client.post("/access-lists", json={"name": "x"}, headers=elder_headers).status_code == 403


# ============================================================================
# Admin
# ============================================================================

class TestAdminApi:
    """Audit trail and health."""

    def test_mutations_are_audited(self, client, chief_headers):
        client.post("/roles", json={"name": "Scribe"}, headers=chief_headers)
        resp = client.get("/admin/audit", params={"resourceType": "role"}, headers=chief_headers)
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 1
        entry = body["logs"][0]
        assert entry["action"] == "role.created"
        assert entry["actorRole"] == "Chief"
        assert entry["requestId"]

    def test_audit_needs_access(self, client):
        headers = {"X-Module-Auth": "true", "X-Module-Role": "Builder"}
        assert client.get("/admin/audit", headers=headers).status_code == 403

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
        assert client.get("/admin/health").status_code == 404

    def test_request_id_header(self, client):
        assert client.get("/health").headers["X-Request-Id"]

    def test_forwarded_request_id_reused(self, client, chief_headers):
        headers = dict(chief_headers, **{"X-Request-Id": "console-42"})
        resp = client.post("/roles", json={"name": "Scribe"}, headers=headers)
        assert resp.headers["X-Request-Id"] == "console-42"

        logs = client.get("/admin/audit", params={"action": "role.created"}, headers=chief_headers).json()["logs"]
        assert logs[0]["requestId"] == "console-42"
