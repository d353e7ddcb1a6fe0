"""Unit tests for Keycloak token handling."""

from unittest.mock import MagicMock

import pytest
from keycloak.exceptions import KeycloakConnectionError

from hraccess.infrastructure.auth.keycloak_provider import KeycloakProvider, user_id_from_claims


@pytest.mark.parametrize(
    ("claims", "expected"),
    [
        ({"user_id": "42", "sub": "abc"}, 42),
        ({"user_id": 7}, 7),
        ({"sub": "15"}, 15),
        ({"sub": "0b5c-uuid"}, None),
        ({}, None),
    ],
)
def test_user_id_from_claims(claims: dict, expected: int | None) -> None:
    assert user_id_from_claims(claims) == expected


@pytest.fixture
def provider() -> KeycloakProvider:
    provider = KeycloakProvider("http://kc", "hr", "hraccess-api", "secret")
    provider._keycloak = MagicMock()
    return provider


def test_decode_active_token(provider: KeycloakProvider) -> None:
    provider._keycloak.introspect.return_value = {
        "active": True,
        "sub": "f00",
        "user_id": "12",
        "email": "a@example.com",
        "preferred_username": "alice",
        "realm_access": {"roles": ["hr"]},
    }
    user = provider.decode_token("t")
    assert user is not None
    assert user.user_id == 12
    assert user.username == "alice"
    assert user.realm_roles == ["hr"]


def test_decode_inactive_token(provider: KeycloakProvider) -> None:
    provider._keycloak.introspect.return_value = {"active": False}
    assert provider.decode_token("t") is None


def test_decode_token_without_numeric_id(provider: KeycloakProvider) -> None:
    provider._keycloak.introspect.return_value = {"active": True, "sub": "not-a-number"}
    assert provider.decode_token("t") is None


def test_decode_token_introspection_error(provider: KeycloakProvider) -> None:
    provider._keycloak.introspect.side_effect = KeycloakConnectionError("down")
    assert provider.decode_token("t") is None
