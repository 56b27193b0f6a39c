import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from app.config import settings
from app.schemas.paging import PagedResult
from app.schemas.user import Principal, UserRecord, UserSummary
from app.stores.base import UserStore
from app.utils.clock import utcnow
from app.utils.hashing import PasswordHasher, PasswordTooLongError
from app.utils.paging import filter_by_search, paginate, sort_records
from app.utils.password_reset import generate_reset_token, hash_token, token_matches

logger = logging.getLogger("app.credentials")

USER_SEARCH_FIELDS = ("username",)
USER_SORT_FIELDS = {"username": "username", "role": "role"}
USER_DEFAULT_SORT = ("username", True)


def normalize_username(username: str) -> str:
    return username.strip().lower()


class CredentialService:
    """
    Registration, login checks, admin user management and the password
    reset token lifecycle. "Not found", "already exists" and "bad token" are
    reported as False / None; only store failures raise.
    """

    def __init__(
        self,
        store: UserStore,
        hasher: PasswordHasher,
        clock: Callable[[], datetime] = utcnow,
        reset_token_ttl: timedelta = timedelta(minutes=settings.RESET_TOKEN_EXPIRE_MINUTES),
    ):
        self.store = store
        self.hasher = hasher
        self.clock = clock
        self.reset_token_ttl = reset_token_ttl

    def register(self, username: str, password: str, role: str = "User") -> bool:
        user = UserRecord(
            username=normalize_username(username),
            password_hash=self.hasher.hash(password),
            role=role,
        )
        created = self.store.insert_if_absent(user)
        if created is None:
            return False
        logger.info("Registered user %s (%s)", created.username, created.role)
        return True

    def validate_credentials(self, username: Optional[str], password: Optional[str]) -> Optional[Principal]:
        if not username or not username.strip() or password is None:
            return None

        user = self.store.get_by_username(normalize_username(username))
        if user is None:
            self.hasher.dummy_verify()
            return None

        try:
            ok = self.hasher.verify(password, user.password_hash)
        except PasswordTooLongError:
            ok = False
        if not ok:
            return None
        return Principal(identity=user.username, role=user.role)

    def get_user(self, username: str) -> Optional[UserSummary]:
        user = self.store.get_by_username(normalize_username(username))
        return UserSummary.model_validate(user) if user else None

    def list_users(
        self,
        page: int,
        page_size: int,
        search_term: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_ascending: bool = True,
    ) -> PagedResult[UserSummary]:
        users = filter_by_search(self.store.query_all(), search_term, USER_SEARCH_FIELDS)
        users = sort_records(users, USER_SORT_FIELDS, sort_by, sort_ascending, USER_DEFAULT_SORT)
        window = paginate(users, page, page_size)
        return PagedResult[UserSummary](
            items=[UserSummary.model_validate(u) for u in window.items],
            total_count=window.total_count,
        )

    def delete_user(self, username: str) -> bool:
        user = self.store.get_by_username(normalize_username(username))
        if user is None:
            return False
        deleted = self.store.delete(user.id)
        if deleted:
            logger.info("Deleted user %s", user.username)
        return deleted

    def update_role(self, username: str, role: str) -> bool:
        user = self.store.get_by_username(normalize_username(username))
        if user is None:
            return False
        updated = self.store.update(user.model_copy(update={"role": role}))
        if updated:
            logger.info("Role of %s set to %s", user.username, role)
        return updated

    def generate_password_reset_token(self, username: str) -> Optional[str]:
        user = self.store.get_by_username(normalize_username(username))
        if user is None:
            return None

        # a new token replaces any outstanding one
        token = generate_reset_token()
        stored = self.store.update(user.model_copy(update={
            "reset_token_hash": hash_token(token),
            "reset_token_expires": self.clock() + self.reset_token_ttl,
        }))
        if not stored:
            # user removed since the lookup
            return None
        logger.info("Password reset token issued for %s", user.username)
        return token

    def reset_password(self, username: str, token: str, new_password: str) -> bool:
        user = self.store.get_by_username(normalize_username(username))
        if user is None or not token:
            return False
        if not token_matches(token, user.reset_token_hash):
            return False
        if user.reset_token_expires is None or self.clock() >= user.reset_token_expires:
            return False

        # hash before consuming; the store re-checks the token and clears it in one step
        new_hash = self.hasher.hash(new_password)
        consumed = self.store.consume_reset_token(user.id, hash_token(token), self.clock(), new_hash)
        if consumed:
            logger.info("Password reset for %s", user.username)
        return consumed

    def ensure_admin(self, username: str, password: str) -> bool:
        """Create the bootstrap admin account if it does not exist yet."""
        created = self.register(username, password, role="Admin")
        if not created:
            logger.info("Admin account %s already present", normalize_username(username))
        return created
