import hashlib
import hmac
import secrets
from dataclasses import dataclass


@dataclass(frozen=True)
class SessionToken:
    plain: str
    hashed: str


def generate_session_token() -> SessionToken:
    plain = secrets.token_urlsafe(32)
    return SessionToken(plain=plain, hashed=hash_token(plain))


def hash_token(plain: str) -> str:
    # Only the digest is kept server-side; a leaked registry can't be replayed.
    return hashlib.sha256(plain.encode("utf-8")).hexdigest()


def secret_digest(value: str) -> bytes:
    return hashlib.sha256(value.encode("utf-8")).digest()


def secrets_match(candidate: str, expected_digest: bytes) -> bool:
    # Fixed-length digests: compare time depends on neither prefix match nor length.
    return hmac.compare_digest(secret_digest(candidate), expected_digest)
