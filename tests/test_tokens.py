# tests/test_tokens.py
import hashlib
from datetime import timedelta

import pytest

from cinema_api.errors import (
    ErrorKind,
    FailedValidationError,
    RecordNotFoundError,
    TokenExpiredError,
    TokenGenerationError
)
from cinema_api.tokens.models import TokenScope
from cinema_api.tokens.service import TokenAuthority
from cinema_api.tokens.token_manager import DefaultTokenManager, TOKEN_PLAINTEXT_LENGTH

TTL = timedelta(hours=24)


def test_generated_tokens_are_26_chars_and_hashed_with_sha256():
    manager = DefaultTokenManager()
    plaintext, token_hash = manager.generate_token_and_hash()

    assert len(plaintext) == TOKEN_PLAINTEXT_LENGTH
    assert "=" not in plaintext
    assert token_hash == hashlib.sha256(plaintext.encode("utf-8")).hexdigest()
    assert manager.hash_token(plaintext) == token_hash
    assert manager.generate_token_and_hash()[0] != plaintext


def test_random_source_failure_is_a_generation_error(monkeypatch):
    def broken_source(n):
        raise OSError("entropy pool unavailable")

    monkeypatch.setattr("cinema_api.tokens.token_manager.secrets.token_bytes", broken_source)

    with pytest.raises(TokenGenerationError) as exc_info:
        DefaultTokenManager().generate_token_and_hash()
    assert exc_info.value.kind is ErrorKind.INTERNAL


async def test_issue_stores_only_the_hash(authority, user, clock, db):
    token = await authority.issue(user.id, TTL, TokenScope.AUTHORIZATION)

    assert token.user_id == user.id
    assert token.scope is TokenScope.AUTHORIZATION
    assert token.expiry == clock() + TTL

    rows = db.execute("SELECT hash, scope FROM tokens").fetchall()
    assert [(row["hash"], row["scope"]) for row in rows] == [(token.hash, "authorization")]
    assert rows[0]["hash"] != token.plaintext


async def test_authenticate_resolves_the_owner(authority, user):
    token = await authority.issue(user.id, TTL, TokenScope.AUTHORIZATION)
    assert await authority.authenticate(token.plaintext, TokenScope.AUTHORIZATION) == user.id


async def test_token_does_not_authenticate_in_another_scope(authority, user):
    token = await authority.issue(user.id, TTL, TokenScope.ACTIVATION)

    with pytest.raises(RecordNotFoundError):
        await authority.authenticate(token.plaintext, TokenScope.AUTHORIZATION)


async def test_unknown_token_is_not_found(authority, user):
    with pytest.raises(RecordNotFoundError):
        await authority.authenticate("A" * TOKEN_PLAINTEXT_LENGTH, TokenScope.AUTHORIZATION)


async def test_token_expires_at_its_expiry(authority, user, clock):
    token = await authority.issue(user.id, TTL, TokenScope.AUTHORIZATION)

    clock.advance(TTL - timedelta(seconds=1))
    assert await authority.authenticate(token.plaintext, TokenScope.AUTHORIZATION) == user.id

    clock.advance(timedelta(seconds=1))
    with pytest.raises(TokenExpiredError) as exc_info:
        await authority.authenticate(token.plaintext, TokenScope.AUTHORIZATION)
    assert exc_info.value.kind is ErrorKind.TOKEN_EXPIRED
    assert exc_info.value.status_code == 401


@pytest.mark.parametrize("plaintext,message", [
    ("", "must be provided"),
    ("too-short", "must be 26 bytes long"),
    ("X" * 27, "must be 26 bytes long"),
])
async def test_malformed_plaintext_fails_validation(authority, plaintext, message):
    with pytest.raises(FailedValidationError) as exc_info:
        await authority.authenticate(plaintext, TokenScope.AUTHORIZATION)
    assert exc_info.value.errors == {"token": message}


async def test_revoke_all_only_touches_one_scope(authority, user):
    first = await authority.issue(user.id, TTL, TokenScope.AUTHORIZATION)
    second = await authority.issue(user.id, TTL, TokenScope.AUTHORIZATION)
    activation = await authority.issue(user.id, TTL, TokenScope.ACTIVATION)

    await authority.revoke_all(user.id, TokenScope.AUTHORIZATION)

    for token in (first, second):
        with pytest.raises(RecordNotFoundError):
            await authority.authenticate(token.plaintext, TokenScope.AUTHORIZATION)
    assert await authority.authenticate(activation.plaintext, TokenScope.ACTIVATION) == user.id


async def test_revoke_all_without_tokens_is_a_no_op(authority, user, token_store):
    await authority.revoke_all(user.id, TokenScope.ACTIVATION)
    assert await token_store.delete_all_for_user(user.id, TokenScope.ACTIVATION) == 0


async def test_reissue_supersedes_previous_tokens(authority, user):
    old = await authority.issue(user.id, TTL, TokenScope.ACTIVATION)
    new = await authority.reissue(user.id, TTL, TokenScope.ACTIVATION)

    with pytest.raises(RecordNotFoundError):
        await authority.authenticate(old.plaintext, TokenScope.ACTIVATION)
    assert await authority.authenticate(new.plaintext, TokenScope.ACTIVATION) == user.id


async def test_tokens_are_removed_with_their_user(token_store, user, db, clock):
    authority = TokenAuthority(token_store, clock=clock)
    await authority.issue(user.id, TTL, TokenScope.AUTHORIZATION)

    db.execute("DELETE FROM users WHERE id = ?", (user.id,))
    db.commit()

    assert db.execute("SELECT count(*) FROM tokens").fetchone()[0] == 0
