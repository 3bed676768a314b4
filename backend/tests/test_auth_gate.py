# tests/test_auth_gate.py
from __future__ import annotations

import uuid

import pytest

from notevault.api.deps.auth import authenticate
from notevault.auth.identity import IdentityContext
from notevault.core.errors import InvalidToken, MalformedAuthorizationHeader, MissingAuthorization
from notevault.core.roles import UserRole
from notevault.core.security import TokenService

SECRET = "gate-test-secret-gate-test-secret-0001"
USER_ID = str(uuid.uuid4())


@pytest.fixture()
def tokens() -> TokenService:
    return TokenService(lambda: SECRET)


@pytest.mark.parametrize("raw", [None, "", "   "])
def test_missing_header(tokens, raw):
    with pytest.raises(MissingAuthorization):
        authenticate(raw, tokens)


@pytest.mark.parametrize(
    "raw",
    [
        "Bearer",
        "tokenonly",
        "Bearer abc def",
        "Bearer a b c",
    ],
)
def test_header_must_have_exactly_two_parts(tokens, raw):
    with pytest.raises(MalformedAuthorizationHeader):
        authenticate(raw, tokens)


def test_scheme_must_be_bearer(tokens):
    token = tokens.issue("user-1", UserRole.MEMBER, "acme")
    with pytest.raises(MalformedAuthorizationHeader):
        authenticate(f"Basic {token}", tokens)


def test_invalid_token_propagates(tokens):
    with pytest.raises(InvalidToken):
        authenticate("Bearer nope", tokens)


def test_valid_header_yields_identity(tokens):
    token = tokens.issue(USER_ID, UserRole.ADMIN, "acme")

    identity = authenticate(f"bearer {token}", tokens)

    assert identity == IdentityContext(user_id=USER_ID, role=UserRole.ADMIN, tenant_slug="acme")
    assert identity.is_admin


@pytest.mark.parametrize("subject", ["user-1", "not-a-uuid", "12345"])
def test_subject_must_be_a_user_id(tokens, subject):
    token = tokens.issue(subject, UserRole.MEMBER, "acme")
    with pytest.raises(InvalidToken):
        authenticate(f"Bearer {token}", tokens)
