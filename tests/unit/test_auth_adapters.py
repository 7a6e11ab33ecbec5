from datetime import UTC, datetime, timedelta

from advisornet.adapters.auth.crypto import Argon2AuthAdapter, JWTAuthAdapter

SECRET = "test-secret"


def test_argon2_roundtrip():
    adapter = Argon2AuthAdapter()
    hashed = adapter.hash_password("correct horse")

    assert hashed != "correct horse"
    assert adapter.verify_password("correct horse", hashed)
    assert not adapter.verify_password("wrong", hashed)


def test_argon2_rejects_garbage_hash():
    assert not Argon2AuthAdapter().verify_password("pw", "not-a-hash")


def test_jwt_adapter_rejects_garbage_hash():
    assert not JWTAuthAdapter(SECRET).verify_password("pw", "not-a-hash")


def test_hashes_are_interchangeable():
    # The CLI hashes with argon2-cffi, the API verifies through passlib
    hashed = Argon2AuthAdapter().hash_password("bootstrap-pw")
    assert JWTAuthAdapter(SECRET).verify_password("bootstrap-pw", hashed)

    api_hash = JWTAuthAdapter(SECRET).hash_password("member-pw")
    assert Argon2AuthAdapter().verify_password("member-pw", api_hash)


def test_jwt_token_carries_user_id():
    adapter = JWTAuthAdapter(SECRET)
    token = adapter.create_token("user-123", ttl_minutes=5)
    assert adapter.validate_token(token) == "user-123"


def test_expired_token_is_invalid():
    adapter = JWTAuthAdapter(SECRET)
    issued = datetime.now(UTC) - timedelta(hours=2)
    token = adapter.create_token("u", ttl_minutes=1, now_utc=issued)
    assert adapter.decode_token(token) is None


def test_tampered_token_is_invalid():
    adapter = JWTAuthAdapter(SECRET)
    token = adapter.create_token("u", ttl_minutes=5)
    assert adapter.validate_token(token[:-2] + "xx") is None


def test_token_bound_to_signing_key():
    token = JWTAuthAdapter(SECRET).create_token("u", ttl_minutes=5)
    assert JWTAuthAdapter("another-secret").validate_token(token) is None


def test_settings_come_from_rules(rules):
    rules.auth.sessions.token_algorithm = "HS512"
    adapter = JWTAuthAdapter.from_rules(SECRET, rules.auth)

    assert adapter.token_algorithm == "HS512"
    token = adapter.create_token("u", ttl_minutes=5)
    assert JWTAuthAdapter(SECRET, token_algorithm="HS256").validate_token(token) is None
    assert adapter.validate_token(token) == "u"
