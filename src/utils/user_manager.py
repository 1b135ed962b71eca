"""User management utilities.

This module provides user storage, password hashing, archiving and
credential checks on top of the document store.
"""

import logging
import secrets
from typing import List, Optional

import bcrypt

from core.document_store import DocumentStore
from core.exceptions import ConflictError, NotFoundError, ValidationError
from schemas.common import utc_now_iso
from schemas.document import Document
from schemas.user import CreateUserRequest, User, UserRole, UserStatus

logger = logging.getLogger(__name__)

# Bcrypt rounds for password hashing (higher = more secure but slower)
BCRYPT_ROUNDS = 10


def _find_user_index(document: Document, user_id: str) -> Optional[int]:
    for index, record in enumerate(document.users):
        if record.get("userId") == user_id:
            return index
    return None


class UserManager:
    """Manages user data persistence and operations."""

    def __init__(self, store: DocumentStore):
        """Initialize UserManager.

        Args:
            store: The document store.
        """
        self.store = store

    def hash_password(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password.

        Returns:
            Hashed password (bcrypt hash string).
        """
        # bcrypt only looks at the first 72 bytes
        password_bytes = password.encode("utf-8")[:72]
        salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
        return bcrypt.hashpw(password_bytes, salt).decode("utf-8")

    def verify_password(self, plain_password: str, hashed_password: str) -> bool:
        """Verify a password against a bcrypt hash.

        Returns:
            True if password matches, False otherwise.
        """
        try:
            return bcrypt.checkpw(
                plain_password.encode("utf-8")[:72], hashed_password.encode("utf-8")
            )
        except ValueError as e:
            logger.error("Password verification error: %s", e)
            return False

    @staticmethod
    def _generate_user_id(document: Document, role: UserRole) -> str:
        taken = {u.get("userId") for u in document.users}
        while True:
            user_id = f"{role.id_prefix}{1000 + secrets.randbelow(9000)}"
            if user_id not in taken:
                return user_id

    def create_user(self, req: CreateUserRequest) -> User:
        """Register a new user.

        Raises:
            ValidationError: If a field is missing or the role is unknown.
            ConflictError: If the email is already registered.
        """
        if not (req.full_name and req.user_type and req.email and req.password):
            raise ValidationError(
                "All fields are required (fullName, userType, email, password)."
            )
        try:
            role = UserRole(req.user_type)
        except ValueError as e:
            allowed = ", ".join(r.value for r in UserRole)
            raise ValidationError(f"Invalid userType. Must be one of: {allowed}.") from e

        email = req.email.strip().lower()
        password_hash = self.hash_password(req.password)
        with self.store.transaction() as document:
            if any((u.get("email") or "").lower() == email for u in document.users):
                raise ConflictError("Email already registered.")
            user = User(
                user_id=self._generate_user_id(document, role),
                full_name=req.full_name.strip(),
                user_type=role,
                email=email,
                password=password_hash,
            )
            document.users.append(user.to_record())

        logger.info("Created user %s (%s)", user.user_id, role.value)
        return user

    def list_users(self) -> List[User]:
        return [User.model_validate(u) for u in self.store.load().users]

    def get_user(self, user_id: str) -> Optional[User]:
        """Get a user by userId, archived or not."""
        document = self.store.load()
        index = _find_user_index(document, user_id)
        return User.model_validate(document.users[index]) if index is not None else None

    def get_active_user(self, user_id: str) -> User:
        """Raises NotFoundError unless the user exists and is not archived."""
        user = self.get_user(user_id)
        if user is None or user.is_archived:
            raise NotFoundError("Active user not found")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        email = (email or "").strip().lower()
        for record in self.store.load().users:
            if (record.get("email") or "").lower() == email:
                return User.model_validate(record)
        return None

    def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the active user matching the credentials, else None."""
        user = self.get_user_by_email(email)
        if user is None or user.is_archived:
            return None
        if not self.verify_password(password or "", user.password):
            return None
        return user

    def _set_status(self, user_id: str, archive: bool) -> User:
        with self.store.transaction() as document:
            index = _find_user_index(document, user_id)
            if index is None:
                raise NotFoundError("User not found.")
            user = User.model_validate(document.users[index])
            if archive and user.is_archived:
                raise ValidationError("User is already archived.")
            if not archive and not user.is_archived:
                raise ValidationError("User is not archived.")
            user.status = UserStatus.ARCHIVED if archive else UserStatus.ACTIVE
            user.date_archived = utc_now_iso() if archive else None
            document.users[index] = user.to_record()
        logger.info("User %s %s", user_id, "archived" if archive else "restored")
        return user

    def archive_user(self, user_id: str) -> User:
        return self._set_status(user_id, archive=True)

    def restore_user(self, user_id: str) -> User:
        return self._set_status(user_id, archive=False)

    def list_archived_users(self) -> List[User]:
        return [u for u in self.list_users() if u.is_archived]

    def restore_all(self) -> int:
        """Restore every archived user. Returns how many were restored."""
        restored = 0
        with self.store.transaction() as document:
            for record in document.users:
                if record.get("status") == UserStatus.ARCHIVED.value:
                    record["status"] = UserStatus.ACTIVE.value
                    record["dateArchived"] = None
                    restored += 1
        logger.info("Restored %d archived user(s)", restored)
        return restored

    def purge_user(self, user_id: str) -> None:
        """Permanently delete an archived user.

        Raises:
            NotFoundError: If no archived user has this userId.
        """
        with self.store.transaction() as document:
            index = _find_user_index(document, user_id)
            if index is None or document.users[index].get("status") != UserStatus.ARCHIVED.value:
                raise NotFoundError("Archived user not found.")
            del document.users[index]
        logger.info("Deleted archived user %s permanently", user_id)

    def purge_all_archived(self) -> int:
        """Permanently delete every archived user. Returns the count."""
        with self.store.transaction() as document:
            kept = [u for u in document.users if u.get("status") != UserStatus.ARCHIVED.value]
            removed = len(document.users) - len(kept)
            document.users = kept
        logger.info("Deleted %d archived user(s) permanently", removed)
        return removed
