"""Unit tests for meetsync.services.credential_store against SQLite."""

import os
import tempfile
import unittest
from concurrent.futures import ThreadPoolExecutor

from meetsync.core.database import build_engine, build_session_factory
from meetsync.core.errors import DuplicateAccountError
from meetsync.models import Base, User
from meetsync.services.credential_store import CredentialStore, normalize_account_id


def _memory_store() -> tuple[CredentialStore, object]:
    engine = build_engine("sqlite://")
    Base.metadata.create_all(engine)
    return CredentialStore(build_session_factory(engine)), engine


class TestNormalizeAccountId(unittest.TestCase):
    def test_trims_and_lowercases(self) -> None:
        self.assertEqual(normalize_account_id("  Ana@X.com "), "ana@x.com")


class TestCreateAndFind(unittest.TestCase):
    def setUp(self) -> None:
        self.store, self.engine = _memory_store()

    def tearDown(self) -> None:
        self.engine.dispose()

    def test_create_assigns_id_and_member_role(self) -> None:
        identity = self.store.create_identity("Ana", "ana@x.com", "digest")
        self.assertIsInstance(identity.id, int)
        self.assertEqual(identity.role, "member")
        self.assertEqual(identity.email, "ana@x.com")
        self.assertIsNotNone(identity.created_at)

    def test_email_stored_normalized(self) -> None:
        identity = self.store.create_identity(" Ana ", " ANA@X.com ", "digest")
        self.assertEqual(identity.email, "ana@x.com")
        self.assertEqual(identity.name, "Ana")

    def test_find_by_account_id_is_case_insensitive(self) -> None:
        created = self.store.create_identity("Ana", "ana@x.com", "digest")
        found = self.store.find_by_account_id("ANA@x.COM")
        self.assertIsNotNone(found)
        self.assertEqual(found.id, created.id)
        self.assertEqual(found.password_hash, "digest")

    def test_find_unknown_returns_none(self) -> None:
        self.assertIsNone(self.store.find_by_account_id("nobody@x.com"))
        self.assertIsNone(self.store.find_by_id(999))
        self.assertIsNone(self.store.find_by_id("not-an-int"))

    def test_find_by_id_accepts_token_subject_string(self) -> None:
        created = self.store.create_identity("Ana", "ana@x.com", "digest", role="admin")
        found = self.store.find_by_id(str(created.id))
        self.assertEqual(found.role, "admin")

    def test_duplicate_rejected_and_not_merged(self) -> None:
        self.store.create_identity("Ana", "ana@x.com", "digest-1")
        with self.assertRaises(DuplicateAccountError) as ctx:
            self.store.create_identity("Other", "ANA@x.com", "digest-2")
        self.assertEqual(ctx.exception.message, "User already exists")
        kept = self.store.find_by_account_id("ana@x.com")
        self.assertEqual(kept.name, "Ana")
        self.assertEqual(kept.password_hash, "digest-1")

    def test_password_hash_not_serialized(self) -> None:
        identity = self.store.create_identity("Ana", "ana@x.com", "digest")
        self.assertNotIn("password_hash", identity.model_dump())
        self.assertNotIn("digest", repr(identity))


class TestConcurrentSignup(unittest.TestCase):
    """Concurrent creates with one email: exactly one succeeds, the rest are DuplicateAccount."""

    def test_exactly_one_wins(self) -> None:
        fd, path = tempfile.mkstemp(suffix=".db")
        os.close(fd)
        engine = build_engine(f"sqlite:///{path}")
        try:
            Base.metadata.create_all(engine)
            store = CredentialStore(build_session_factory(engine))

            def attempt(i: int) -> str:
                try:
                    store.create_identity(f"Ana {i}", "ana@x.com", "digest")
                    return "created"
                except DuplicateAccountError:
                    return "duplicate"

            with ThreadPoolExecutor(max_workers=8) as pool:
                outcomes = list(pool.map(attempt, range(8)))

            self.assertEqual(outcomes.count("created"), 1)
            self.assertEqual(outcomes.count("duplicate"), 7)
            with build_session_factory(engine)() as db:
                self.assertEqual(db.query(User).count(), 1)
        finally:
            engine.dispose()
            os.remove(path)


if __name__ == "__main__":
    unittest.main()
