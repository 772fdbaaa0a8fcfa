"""Tests du résolveur de portée d'accès."""

import pytest

from shelter.domain.access import AccessScopeResolver
from shelter.domain.entities import Caller, Membership
from shelter.domain.errors import Forbidden, Unauthenticated
from tests.fakes import FakeMemberships

ADMIN = Caller(user_id=1, is_admin=True)
GROUP_ADMIN = Caller(user_id=2)
MEMBER = Caller(user_id=3)
OUTSIDER = Caller(user_id=4)


@pytest.fixture
def resolver() -> AccessScopeResolver:
    return AccessScopeResolver(
        FakeMemberships(
            {
                2: [Membership(5, "dogs", is_group_admin=True), Membership(6, "cats")],
                3: [Membership(5, "dogs")],
            }
        )
    )


def test_can_access_group(resolver: AccessScopeResolver) -> None:
    assert resolver.can_access_group(ADMIN, 99)
    assert resolver.can_access_group(GROUP_ADMIN, 6)
    assert resolver.can_access_group(MEMBER, 5)
    assert not resolver.can_access_group(MEMBER, 6)
    assert not resolver.can_access_group(OUTSIDER, 5)
    assert not resolver.can_access_group(None, 5)


def test_group_admin_queries(resolver: AccessScopeResolver) -> None:
    assert resolver.is_group_admin_for_any_group(GROUP_ADMIN)
    assert not resolver.is_group_admin_for_any_group(MEMBER)
    assert resolver.administered_group_ids(GROUP_ADMIN) == {5}
    assert resolver.administered_group_ids(MEMBER) == set()


def test_require_group_access(resolver: AccessScopeResolver) -> None:
    resolver.require_group_access(MEMBER, 5)
    with pytest.raises(Forbidden):
        resolver.require_group_access(MEMBER, 6)
    with pytest.raises(Unauthenticated):
        resolver.require_group_access(None, 5)


def test_require_group_admin(resolver: AccessScopeResolver) -> None:
    resolver.require_group_admin(ADMIN, 99, "nope")
    resolver.require_group_admin(GROUP_ADMIN, 5, "nope")
    with pytest.raises(Forbidden) as exc:
        resolver.require_group_admin(GROUP_ADMIN, 6, "only group admins can create tags")
    assert exc.value.message == "only group admins can create tags"
    with pytest.raises(Forbidden):
        resolver.require_group_admin(MEMBER, 5, "nope")
    with pytest.raises(Unauthenticated):
        resolver.require_group_admin(None, 5, "nope")
