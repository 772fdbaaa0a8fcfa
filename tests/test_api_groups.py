"""Tests HTTP des groupes: création, adhésions et administrateurs de groupe."""

from __future__ import annotations

import pytest

from shelter.core.http_constants import (
    HTTP_BAD_REQUEST,
    HTTP_CONFLICT,
    HTTP_CREATED,
    HTTP_FORBIDDEN,
    HTTP_NOT_FOUND,
    HTTP_OK,
    HTTP_UNAUTHORIZED,
)
from tests.helpers import auth_headers


@pytest.fixture
def roster(seed):
    """Un groupe existant, un administrateur du site, un responsable et un bénévole."""
    gid = seed.group("dogs")
    admin = seed.user("root", is_admin=True)
    lead = seed.user("lead")
    seed.member(lead, gid, is_group_admin=True)
    vol = seed.user("vol")
    seed.member(vol, gid)
    newcomer = seed.user("new")
    return {"gid": gid, "admin": admin, "lead": lead, "vol": vol, "newcomer": newcomer}


def test_site_admin_creates_group(client, roster) -> None:
    h = auth_headers(roster["admin"])
    r = client.post("/groups", json={"name": " Cats ", "description": "felines"}, headers=h)
    assert r.status_code == HTTP_CREATED
    assert r.json()["name"] == "Cats"
    r = client.get("/groups", headers=h)
    assert [g["name"] for g in r.json()] == ["Cats", "dogs"]

    r = client.post("/groups", json={"name": "cats"}, headers=h)
    assert r.status_code == HTTP_CONFLICT
    assert r.json()["code"] == "CONFLICT"


def test_create_group_requires_site_admin(client, roster) -> None:
    r = client.post("/groups", json={"name": "Cats"}, headers=auth_headers(roster["lead"]))
    assert r.status_code == HTTP_FORBIDDEN
    assert client.post("/groups", json={"name": "Cats"}).status_code == HTTP_UNAUTHORIZED


def test_create_group_validates_name(client, roster) -> None:
    r = client.post("/groups", json={"name": "x"}, headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_BAD_REQUEST


def test_member_lists_only_own_groups(client, seed, roster) -> None:
    seed.group("cats")
    r = client.get("/groups", headers=auth_headers(roster["vol"]))
    assert [g["id"] for g in r.json()] == [roster["gid"]]
    r = client.get("/groups", headers=auth_headers(roster["newcomer"]))
    assert r.json() == []


def test_add_member_grants_group_access(client, roster) -> None:
    gid, newcomer = roster["gid"], roster["newcomer"]
    assert client.get(f"/groups/{gid}/animals", headers=auth_headers(newcomer)).status_code == HTTP_FORBIDDEN

    r = client.post(f"/groups/{gid}/members/{newcomer.id}", headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_OK
    assert r.json()["message"] == "User added to group successfully"
    assert client.get(f"/groups/{gid}/animals", headers=auth_headers(newcomer)).status_code == HTTP_OK

    r = client.post(f"/groups/{gid}/members/{newcomer.id}", headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_CONFLICT


def test_add_member_errors(client, roster) -> None:
    gid, h = roster["gid"], auth_headers(roster["admin"])
    r = client.post(f"/groups/{gid}/members/9999", headers=h)
    assert r.status_code == HTTP_NOT_FOUND
    assert r.json()["message"] == "user not found"
    r = client.post(f"/groups/9999/members/{roster['newcomer'].id}", headers=h)
    assert r.json()["message"] == "group not found"
    r = client.post(f"/groups/{gid}/members/{roster['newcomer'].id}", headers=auth_headers(roster["lead"]))
    assert r.status_code == HTTP_FORBIDDEN


def test_remove_member_revokes_access(client, roster) -> None:
    gid, vol = roster["gid"], roster["vol"]
    r = client.delete(f"/groups/{gid}/members/{vol.id}", headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_OK
    assert client.get(f"/groups/{gid}/animals", headers=auth_headers(vol)).status_code == HTTP_FORBIDDEN
    r = client.delete(f"/groups/{gid}/members/{vol.id}", headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_NOT_FOUND


def test_list_members(client, roster) -> None:
    gid = roster["gid"]
    r = client.get(f"/groups/{gid}/members", headers=auth_headers(roster["vol"]))
    assert r.status_code == HTTP_OK
    assert [(m["username"], m["is_group_admin"]) for m in r.json()] == [("lead", True), ("vol", False)]
    r = client.get(f"/groups/{gid}/members", headers=auth_headers(roster["newcomer"]))
    assert r.status_code == HTTP_FORBIDDEN


def test_group_admin_promotes_and_demotes(client, roster) -> None:
    gid, vol = roster["gid"], roster["vol"]
    h = auth_headers(roster["lead"])
    r = client.post(f"/groups/{gid}/admins/{vol.id}", headers=h)
    assert r.status_code == HTTP_OK
    assert r.json()["message"] == "User promoted to group admin"
    # Le nouvel administrateur de groupe accède à l'édition groupée.
    assert client.get("/bulk-animals", headers=auth_headers(vol)).status_code == HTTP_OK

    r = client.post(f"/groups/{gid}/admins/{vol.id}", headers=h)
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["message"] == "user is already a group admin"

    r = client.delete(f"/groups/{gid}/admins/{vol.id}", headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_OK
    r = client.delete(f"/groups/{gid}/admins/{vol.id}", headers=h)
    assert r.json()["message"] == "user is not a group admin"
    assert client.get("/bulk-animals", headers=auth_headers(vol)).status_code == HTTP_FORBIDDEN


def test_promote_rules(client, seed, roster) -> None:
    gid = roster["gid"]
    r = client.post(f"/groups/{gid}/admins/{roster['newcomer'].id}", headers=auth_headers(roster["admin"]))
    assert r.status_code == HTTP_BAD_REQUEST
    assert r.json()["message"] == "user is not a member of this group"

    r = client.post(f"/groups/{gid}/admins/{roster['lead'].id}", headers=auth_headers(roster["vol"]))
    assert r.status_code == HTTP_FORBIDDEN

    # Administrer un groupe ne donne aucun droit sur un autre.
    other = seed.group("cats")
    seed.member(roster["vol"], other)
    r = client.post(f"/groups/{other}/admins/{roster['vol'].id}", headers=auth_headers(roster["lead"]))
    assert r.status_code == HTTP_FORBIDDEN
