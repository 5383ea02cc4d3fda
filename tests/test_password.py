import bcrypt
import pytest

from spms.auth.password import BCRYPT_ROUNDS, hash_password, needs_rehash, verify_password


def test_hash_and_verify():
    hashed = hash_password("correct horse")
    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


def test_hashes_are_salted():
    assert hash_password("same") != hash_password("same")


def test_hash_uses_cost_factor_ten():
    hashed = hash_password("anything")
    assert hashed.startswith(f"$2b${BCRYPT_ROUNDS:02d}$")
    assert not needs_rehash(hashed)


def test_hashes_from_other_bcrypt_implementations_verify():
    # $2a$ hashes as written by node bcrypt libraries
    legacy = bcrypt.hashpw(b"secret123", bcrypt.gensalt(rounds=4, prefix=b"2a")).decode()
    assert legacy.startswith("$2a$04$")
    assert verify_password("secret123", legacy)
    assert needs_rehash(legacy)


def test_only_first_72_bytes_count():
    base = "x" * 72
    hashed = hash_password(base + "tail")
    assert verify_password(base + "different tail", hashed)


def test_empty_password_rejected():
    with pytest.raises(ValueError):
        hash_password("")
    assert not verify_password("", hash_password("abc"))


@pytest.mark.parametrize("stored", ["", "not-a-hash", "$2b$10$short"])
def test_malformed_hash_never_verifies(stored):
    assert verify_password("secret123", stored) is False


def test_needs_rehash_on_garbage():
    assert needs_rehash("garbage")
