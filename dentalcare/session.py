"""
Session handling for DentalCare.

`SessionStore` authenticates against the fixed identity and credential
tables, keeps the signed-in user, and mirrors it to local storage so a
restart restores the session. The restored user is trusted as-is; the
credentials are not checked again.
"""
# dentalcare/session.py

from dentalcare import codec
from dentalcare.logging_config import get_logger
from dentalcare.seed import SEED_CREDENTIALS, SEED_USERS

logger = get_logger(__name__)


class SessionStore:
    """Holds the currently authenticated user, if any."""

    def __init__(self, storage, identities=None, credentials=None):
        """Restores any persisted session from `storage`.

        Args:
            storage (LocalStorage): Durable key/value store.
            identities (list[User], optional): Known identities. Defaults to the seed table.
            credentials (dict, optional): Email to password map. Defaults to the seed table.
        """
        self._storage = storage
        self._identities = list(SEED_USERS if identities is None else identities)
        self._credentials = dict(SEED_CREDENTIALS if credentials is None else credentials)
        self.current_user = self._restore()

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def _restore(self):
        raw = self._storage.get_item(codec.SESSION_KEY)
        user = codec.decode_user(raw)
        if raw is not None and user is None:
            logger.warning("session_restore_failed")
        elif user is not None:
            logger.info("session_restored", user_id=user.id, role=user.role.value)
        return user

    def login(self, email: str, password: str) -> bool:
        """Authenticates a user and starts a session.

        Both the email and password must match exactly; the result does not say
        which one was wrong. Logging in while already signed in replaces the
        current user on success and leaves it untouched on failure.

        Args:
            email (str): Login email, case-sensitive.
            password (str): Plaintext password.

        Returns:
            bool: True if the credentials matched.
        """
        user = next((u for u in self._identities if u.email == email), None)
        if user is None or self._credentials.get(email) != password:
            logger.info("login_failed", email=email)
            return False

        self.current_user = user
        self._storage.set_item(codec.SESSION_KEY, codec.encode_user(user))
        logger.info("login_succeeded", user_id=user.id, role=user.role.value)
        return True

    def logout(self) -> None:
        """Ends the session. Safe to call when nobody is signed in."""
        if self.current_user is not None:
            logger.info("logout", user_id=self.current_user.id)
        self.current_user = None
        self._storage.remove_item(codec.SESSION_KEY)
