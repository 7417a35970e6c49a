"""Signup, signin and signout flows tying the store, hasher, token issuer and provider together."""

import logging
from dataclasses import dataclass

from fastapi.concurrency import run_in_threadpool

from meetsync.core.errors import InvalidCredentialsError, ValidationError
from meetsync.core.security import (
    BCRYPT_ROUNDS,
    SessionTokenIssuer,
    dummy_password_hash,
    hash_password,
    verify_password,
)
from meetsync.schemas.auth import MISSING_FIELDS_MESSAGE, Identity
from meetsync.services.credential_store import CredentialStore
from meetsync.services.video_provider import StreamVideoProvider, account_user_id

logger = logging.getLogger(__name__)

SIGNOUT_MESSAGE = "Signed out successfully"


@dataclass(frozen=True)
class SigninResult:
    session_token: str
    provider_token: str
    identity: Identity


class AuthService:
    """
    Auth flow orchestrator.

    signup never signs the user in. signin is all-or-nothing across both
    credential systems: the session token is only minted after the provider
    token, so a provider failure leaves the client with neither.
    """

    def __init__(
        self,
        store: CredentialStore,
        tokens: SessionTokenIssuer,
        provider: StreamVideoProvider,
        bcrypt_rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self._store = store
        self._tokens = tokens
        self._provider = provider
        self._bcrypt_rounds = bcrypt_rounds
        # Same cost as stored hashes, so unknown accounts take as long to reject.
        self._dummy_hash = dummy_password_hash(bcrypt_rounds)

    async def signup(self, name: str, email: str, password: str) -> Identity:
        """Register a member account. Raises ValidationError or DuplicateAccountError."""
        if not (name and name.strip()) or not (email and email.strip()) or not password:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        password_hash = await run_in_threadpool(hash_password, password, self._bcrypt_rounds)
        identity = await run_in_threadpool(
            self._store.create_identity, name, email, password_hash
        )
        logger.info("Account created", extra={"identity_id": identity.id})
        return identity

    async def signin(self, email: str, password: str) -> SigninResult:
        """
        Authenticate and mint both credentials.
        Raises ValidationError, InvalidCredentialsError or ProviderUnavailableError.
        """
        if not (email and email.strip()) or not password:
            raise ValidationError(MISSING_FIELDS_MESSAGE)
        identity = await run_in_threadpool(self._store.find_by_account_id, email)
        digest = identity.password_hash if identity is not None else self._dummy_hash
        password_ok = await run_in_threadpool(verify_password, password, digest)
        if identity is None or not password_ok:
            logger.info("Signin rejected", extra={"reason": "invalid_credentials"})
            raise InvalidCredentialsError()

        provider_token = await self._provider.provision_and_mint(
            account_user_id(identity.id), identity.name, identity.role
        )
        session_token = self._tokens.issue(identity.id)
        logger.info("Signin succeeded", extra={"identity_id": identity.id})
        return SigninResult(
            session_token=session_token,
            provider_token=provider_token,
            identity=identity,
        )

    def signout(self) -> str:
        """Stateless sessions: nothing to revoke server-side, the caller clears the cookie."""
        return SIGNOUT_MESSAGE
