"""
Tests for public sharing of single entries.
"""

import pytest

from ouramind.errors import NotFound
from ouramind.models.journal import JournalEntry

ALICE = 1
BOB = 2


@pytest.fixture
def entry_id(journal):
    return journal.create(ALICE, "I'm proud of today.").entry_id


def test_make_public_issues_token_and_flags_entry(share, db, entry_id):
    token = share.make_public(entry_id, ALICE)
    row = db.get(JournalEntry, entry_id)
    assert row.is_public is True
    assert row.public_token == token
    assert len(token) >= 43  # 32 random bytes, urlsafe base64


def test_resolve_returns_decrypted_text(share, entry_id):
    token = share.make_public(entry_id, ALICE)
    public = share.resolve(token)
    assert public.text == "I'm proud of today."


def test_tokens_are_unique_per_issue(share, entry_id):
    first = share.make_public(entry_id, ALICE)
    second = share.make_public(entry_id, ALICE)
    assert first != second
    with pytest.raises(NotFound):
        share.resolve(first)
    assert share.resolve(second).text == "I'm proud of today."


def test_make_private_revokes_old_token(share, db, entry_id):
    token = share.make_public(entry_id, ALICE)
    share.make_private(entry_id, ALICE)

    with pytest.raises(NotFound):
        share.resolve(token)
    row = db.get(JournalEntry, entry_id)
    assert row is not None
    assert row.is_public is False
    assert row.public_token is None


def test_stale_token_with_private_flag_does_not_resolve(share, db, entry_id):
    token = share.make_public(entry_id, ALICE)
    row = db.get(JournalEntry, entry_id)
    row.is_public = False
    db.commit()
    with pytest.raises(NotFound):
        share.resolve(token)


@pytest.mark.parametrize("token", ["", "not-a-real-token"])
def test_unknown_tokens_not_found(share, entry_id, token):
    with pytest.raises(NotFound):
        share.resolve(token)


def test_other_user_cannot_share(share, entry_id):
    with pytest.raises(NotFound):
        share.make_public(entry_id, BOB)
    with pytest.raises(NotFound):
        share.make_private(entry_id, BOB)


def test_entry_view_reflects_sharing_state(share, journal, entry_id):
    token = share.make_public(entry_id, ALICE)
    view = journal.get(entry_id, ALICE)
    assert view.is_public is True
    assert view.public_token == token
