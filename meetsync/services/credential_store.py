"""Credential store: persists identities and enforces account identifier uniqueness."""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from meetsync.core.errors import DuplicateAccountError
from meetsync.models.user import User
from meetsync.schemas.auth import ROLE_MEMBER, Identity, Role

logger = logging.getLogger(__name__)


def normalize_account_id(email: str) -> str:
    """Account identifiers are compared trimmed and case-insensitively."""
    return email.strip().lower()


class CredentialStore:
    """
    Repository over the users table.

    Every method opens its own session, so one store instance can be shared
    by concurrent requests. Uniqueness is left to the database's unique index.
    """

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def create_identity(
        self,
        name: str,
        email: str,
        password_hash: str,
        role: Role = ROLE_MEMBER,
    ) -> Identity:
        """Insert a new identity. Raises DuplicateAccountError if the email is taken."""
        user = User(
            name=name.strip(),
            email=normalize_account_id(email),
            password_hash=password_hash,
            role=role,
        )
        with self._session_factory() as db:
            db.add(user)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.info("Duplicate signup rejected", extra={"reason": "email_exists"})
                raise DuplicateAccountError() from e
            db.refresh(user)
            return Identity.model_validate(user)

    def find_by_account_id(self, email: str) -> Identity | None:
        with self._session_factory() as db:
            user = db.query(User).filter(User.email == normalize_account_id(email)).first()
            return Identity.model_validate(user) if user is not None else None

    def find_by_id(self, identity_id: int | str) -> Identity | None:
        """Look up by primary key; ids that are not integers simply do not exist."""
        try:
            pk = int(identity_id)
        except (TypeError, ValueError):
            return None
        with self._session_factory() as db:
            user = db.get(User, pk)
            return Identity.model_validate(user) if user is not None else None
