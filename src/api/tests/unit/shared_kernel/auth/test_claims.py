"""Unit tests for the ClaimSet multimap."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

from shared_kernel.auth.claims import Claim, ClaimSet
from shared_kernel.auth.observability import JWTValidatorProbe


class TestClaimSetLookup:
    """Tests for find_first and find_all."""

    def test_find_first_returns_first_asserted_value(self):
        claims = ClaimSet((Claim("groups", "a"), Claim("groups", "b")))

        assert claims.find_first("groups") == "a"

    def test_find_first_returns_none_when_absent(self):
        assert ClaimSet(()).find_first("email") is None

    def test_find_all_preserves_assertion_order(self):
        claims = ClaimSet(
            (Claim("groups", "b"), Claim("sub", "x"), Claim("groups", "a"))
        )

        assert claims.find_all("groups") == ["b", "a"]

    def test_claim_type_matching_ignores_case(self):
        claims = ClaimSet((Claim("Groups", "Admins"),))

        assert claims.find_all("groups") == ["Admins"]
        assert claims.find_first("GROUPS") == "Admins"

    def test_iterates_in_order(self):
        items = (Claim("sub", "1"), Claim("email", "a@example.com"))

        assert list(ClaimSet(items)) == list(items)
        assert len(ClaimSet(items)) == 2


class TestAuthentication:
    """Tests for the authenticated flag."""

    def test_constructed_sets_are_authenticated(self):
        assert ClaimSet(()).is_authenticated is True

    def test_anonymous_is_empty_and_unauthenticated(self):
        anonymous = ClaimSet.anonymous()

        assert anonymous.is_authenticated is False
        assert len(anonymous) == 0


class TestFromPayload:
    """Tests for flattening a decoded JWT payload."""

    def test_lists_become_repeated_claims(self):
        claims = ClaimSet.from_payload({"groups": ["Users", "Admins"]})

        assert claims.find_all("groups") == ["Users", "Admins"]

    def test_scalars_are_stringified(self):
        claims = ClaimSet.from_payload(
            {"exp": 1700000000, "email_verified": True, "sub": "abc"}
        )

        assert claims.find_first("exp") == "1700000000"
        assert claims.find_first("email_verified") == "true"
        assert claims.find_first("sub") == "abc"

    def test_none_values_are_skipped(self):
        claims = ClaimSet.from_payload({"email": None, "groups": ["a", None]})

        assert claims.find_first("email") is None
        assert claims.find_all("groups") == ["a"]

    def test_objects_are_kept_as_json(self):
        claims = ClaimSet.from_payload({"address": {"country": "NL"}})

        assert json.loads(claims.find_first("address")) == {"country": "NL"}

    def test_realm_access_roles_are_flattened(self):
        claims = ClaimSet.from_payload(
            {"realm_access": {"roles": ["Admins", "offline_access"]}}
        )

        assert claims.find_all("roles") == ["Admins", "offline_access"]
        assert claims.find_first("realm_access") is not None

    def test_realm_roles_already_present_are_not_duplicated(self):
        claims = ClaimSet.from_payload(
            {"roles": ["Admins"], "realm_access": {"roles": ["Admins", "Users"]}}
        )

        assert claims.find_all("roles") == ["Admins", "Users"]

    def test_realm_access_as_json_string_is_parsed(self):
        claims = ClaimSet.from_payload(
            {"realm_access": json.dumps({"roles": ["Admins"]})}
        )

        assert claims.find_all("roles") == ["Admins"]

    def test_malformed_realm_access_is_reported_and_ignored(self):
        probe = MagicMock(spec=JWTValidatorProbe)

        claims = ClaimSet.from_payload({"realm_access": "{not json"}, probe=probe)

        assert claims.find_all("roles") == []
        probe.realm_roles_malformed.assert_called_once()

    def test_realm_access_without_roles_is_reported(self):
        probe = MagicMock(spec=JWTValidatorProbe)

        ClaimSet.from_payload({"realm_access": {"other": []}}, probe=probe)

        probe.realm_roles_malformed.assert_called_once()
