"""
Tests for password hashing and signed session tokens
"""
import base64

from advent.shared.passwords import hash_password, verify_password
from advent.shared.session_tokens import issue_session_token, validate_session_token


def test_password_round_trip():
    stored = hash_password("jingle-bells")
    assert stored.startswith("pbkdf2_sha256$")
    assert "jingle-bells" not in stored
    assert verify_password("jingle-bells", stored)
    assert not verify_password("jingle-bell", stored)


def test_same_password_gets_different_salts():
    assert hash_password("snow") != hash_password("snow")


def test_garbage_hashes_never_verify():
    assert not verify_password("snow", "")
    assert not verify_password("snow", "plaintext")
    assert not verify_password("snow", "md5$1$abc$def")
    assert not verify_password("", hash_password("snow"))


def test_session_token_is_bound_to_slug_and_role():
    token = issue_session_token("xmas", "admin", max_age=60)
    assert validate_session_token(token, "xmas", "admin")
    assert not validate_session_token(token, "xmas", "guest")
    assert not validate_session_token(token, "other", "admin")


def test_session_token_expires():
    token = issue_session_token("xmas", "guest", max_age=60, now=1_000_000)
    assert validate_session_token(token, "xmas", "guest", now=1_000_060)
    assert not validate_session_token(token, "xmas", "guest", now=1_000_061)


def test_tampered_session_token_is_rejected():
    token = issue_session_token("xmas", "guest", max_age=60)
    decoded = base64.urlsafe_b64decode(token.encode()).decode()
    forged = base64.urlsafe_b64encode(decoded.replace(":guest:", ":admin:").encode()).decode()
    assert not validate_session_token(forged, "xmas", "admin")


def test_malformed_session_tokens_are_rejected():
    assert not validate_session_token(None, "xmas", "admin")
    assert not validate_session_token("granted", "xmas", "admin")
    assert not validate_session_token("!!!", "xmas", "admin")
