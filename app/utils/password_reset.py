import secrets
import hashlib

def generate_reset_token() -> str:
    # raw token for the user, shown once
    return secrets.token_urlsafe(32)

def hash_token(token: str) -> str:
    # only the digest is persisted
    return hashlib.sha256(token.encode("utf-8")).hexdigest()

def token_matches(token: str, token_hash: str | None) -> bool:
    if not token_hash:
        return False
    return secrets.compare_digest(hash_token(token), token_hash)
