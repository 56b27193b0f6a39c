from passlib.context import CryptContext

from app.config import settings

BCRYPT_MAX_BYTES = 72


class PasswordTooLongError(ValueError):
    pass


def _check_bcrypt_len(password: str):
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise PasswordTooLongError("Password too long (bcrypt max 72 bytes)")


class PasswordHasher:
    """bcrypt via passlib; rounds are configurable so tests can run cheap hashes."""

    def __init__(self, rounds: int = settings.BCRYPT_ROUNDS):
        self._context = CryptContext(
            schemes=["bcrypt"],
            deprecated="auto",
            bcrypt__rounds=rounds,
        )

    def hash(self, password: str) -> str:
        _check_bcrypt_len(password)
        return self._context.hash(password)

    def verify(self, plain_password: str, hashed_password: str) -> bool:
        _check_bcrypt_len(plain_password)
        return self._context.verify(plain_password, hashed_password)

    def dummy_verify(self) -> None:
        # spend the time of one verify when there is no hash to check against
        self._context.dummy_verify()
