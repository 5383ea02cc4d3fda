import string
from datetime import datetime, timedelta, timezone

from jose import jwt

from spms.auth.jwt import (
    JWT_ALGORITHM,
    JWT_SECRET,
    SESSION_TOKEN_EXPIRE_DAYS,
    create_session_token,
    verify_session_token,
)
from spms.models.role import Role


def test_round_trip():
    token = create_session_token(42, "asha@example.com", Role.STUDENT)
    payload = verify_session_token(token)
    assert payload is not None
    assert payload.user_id == 42
    assert payload.email == "asha@example.com"
    assert payload.role == Role.STUDENT


def test_claims_on_the_wire():
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    token = create_session_token(7, "rao@example.com", Role.STAFF, now=now)
    claims = jwt.get_unverified_claims(token)
    assert claims["userId"] == 7
    assert claims["email"] == "rao@example.com"
    assert claims["role"] == "staff"
    assert claims["exp"] - claims["iat"] == SESSION_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


BASE64URL_ALPHABET = string.ascii_letters + string.digits + "-_"


def test_every_single_character_change_rejected():
    token = create_session_token(1, "asha@example.com", Role.STUDENT)
    signature_start = token.rindex(".") + 1

    accepted = []
    for position, original in enumerate(token):
        if original == ".":
            continue
        # Every alternative for the signature, one per header and payload character
        candidates = [c for c in BASE64URL_ALPHABET if c != original]
        if position < signature_start:
            candidates = candidates[:1]
        for replacement in candidates:
            mutated = token[:position] + replacement + token[position + 1:]
            if verify_session_token(mutated) is not None:
                accepted.append(mutated)

    assert accepted == []


def test_last_signature_character_is_strict():
    token = create_session_token(1, "asha@example.com", Role.STUDENT)
    head, tail = token[:-1], token[-1]
    for replacement in BASE64URL_ALPHABET:
        if replacement != tail:
            assert verify_session_token(head + replacement) is None
    assert verify_session_token(token) is not None


def test_tampered_payload_rejected():
    token = create_session_token(1, "asha@example.com", Role.STUDENT)
    forged = create_session_token(1, "asha@example.com", Role.STAFF)
    header, _, signature = token.split(".")
    assert verify_session_token(".".join([header, forged.split(".")[1], signature])) is None


def test_expired_token_rejected():
    issued = datetime.now(timezone.utc) - timedelta(days=SESSION_TOKEN_EXPIRE_DAYS, minutes=1)
    token = create_session_token(1, "asha@example.com", Role.STUDENT, now=issued)
    assert verify_session_token(token) is None


def test_token_valid_just_before_expiry():
    issued = datetime.now(timezone.utc) - timedelta(days=SESSION_TOKEN_EXPIRE_DAYS) + timedelta(minutes=5)
    token = create_session_token(1, "asha@example.com", Role.STUDENT, now=issued)
    assert verify_session_token(token) is not None


def test_wrong_secret_rejected():
    token = jwt.encode(
        {"userId": 1, "email": "asha@example.com", "role": "student"},
        "some-other-secret",
        algorithm=JWT_ALGORITHM,
    )
    assert verify_session_token(token) is None


def test_garbage_rejected():
    assert verify_session_token("not.a.token") is None
    assert verify_session_token("") is None


def _sign(claims):
    exp = datetime.now(timezone.utc) + timedelta(hours=1)
    return jwt.encode({**claims, "exp": exp}, JWT_SECRET, algorithm=JWT_ALGORITHM)


def test_unknown_role_rejected():
    assert verify_session_token(_sign({"userId": 1, "email": "a@example.com", "role": "admin"})) is None


def test_non_integer_user_id_rejected():
    assert verify_session_token(_sign({"userId": "1", "email": "a@example.com", "role": "student"})) is None
    assert verify_session_token(_sign({"userId": True, "email": "a@example.com", "role": "student"})) is None


def test_missing_email_rejected():
    assert verify_session_token(_sign({"userId": 1, "role": "student"})) is None
