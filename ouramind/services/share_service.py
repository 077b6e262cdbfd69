"""
share_service.py — Public links for single entries
A public token stands in for authentication on exactly one entry. Revoking
clears the token, so an old link stops resolving even though the row stays.
"""

import logging
import secrets

from sqlalchemy.orm import Session

from ouramind.errors import NotFound
from ouramind.models.journal import JournalEntry
from ouramind.schemas import PublicEntry
from ouramind.services.cipher import EntryCipher

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32  # 256 bits of entropy


class ShareService:
    def __init__(self, db: Session, cipher: EntryCipher):
        self.db = db
        self.cipher = cipher

    def make_public(self, entry_id: int, user_id: int) -> str:
        """Issue a fresh token (rotating any existing one) and mark the entry public."""
        entry = self._owned(entry_id, user_id)
        token = secrets.token_urlsafe(TOKEN_BYTES)
        try:
            entry.public_token = token
            entry.is_public = True
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Entry {entry_id} made public by user {user_id}")
        return token

    def make_private(self, entry_id: int, user_id: int) -> None:
        entry = self._owned(entry_id, user_id)
        try:
            entry.public_token = None
            entry.is_public = False
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        logger.info(f"Entry {entry_id} made private by user {user_id}")

    def resolve(self, token: str) -> PublicEntry:
        """Decrypted text and date of a currently public entry."""
        if not token:
            raise NotFound("Public entry not found")
        entry = (
            self.db.query(JournalEntry)
            .filter(JournalEntry.public_token == token, JournalEntry.is_public.is_(True))
            .first()
        )
        if entry is None:
            raise NotFound("Public entry not found")
        return PublicEntry(text=self.cipher.decrypt(entry.ciphertext), date=entry.date)

    def _owned(self, entry_id: int, user_id: int) -> JournalEntry:
        entry = (
            self.db.query(JournalEntry)
            .filter(JournalEntry.id == entry_id, JournalEntry.user_id == user_id)
            .first()
        )
        if entry is None:
            raise NotFound(f"Journal entry {entry_id} not found")
        return entry
