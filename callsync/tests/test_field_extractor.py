"""Tests for dotted-path extraction from Gong call records."""

from __future__ import annotations

import pytest

from callsync.sync.field_extractor import extract, participant_emails


CALL = {
    "id": "123",
    "title": "Renewal",
    "duration": 1800,
    "score": 4.0,
    "ratio": 0.25,
    "recorded": True,
    "blank": "",
    "context": {"account": {"name": "Acme", "domain": "acme.com"}},
    "tags": ["alpha", "beta"],
    "participants": [{"emailAddress": "a@acme.com"}],
}


class TestExtract:
    @pytest.mark.parametrize(
        "path, expected",
        [
            ("id", "123"),
            ("context.account.name", "Acme"),
            ("tags.1", "beta"),
            ("participants.0.emailAddress", "a@acme.com"),
            ("duration", "1800"),
            ("score", "4"),
            ("ratio", "0.25"),
            ("recorded", "true"),
        ],
    )
    def test_resolves_scalars(self, path, expected):
        assert extract(CALL, path) == expected

    @pytest.mark.parametrize(
        "path",
        [
            "missing",
            "context.account.missing",
            "title.length",
            "tags.5",
            "tags.first",
            "context.account",
            "tags",
            "blank",
            "",
        ],
    )
    def test_absent(self, path):
        assert extract(CALL, path) is None

    def test_null_leaf_is_absent(self):
        assert extract({"context": {"account": None}}, "context.account.name") is None

    def test_non_mapping_record(self):
        assert extract(None, "id") is None
        assert extract("call", "id") is None


class TestParticipantEmails:
    def test_keeps_order_and_drops_blanks_and_duplicates(self):
        call = {
            "participants": [
                {"emailAddress": "b@acme.com"},
                {"emailAddress": "  "},
                {"name": "No Email"},
                {"emailAddress": " a@acme.com "},
                {"emailAddress": "b@acme.com"},
                "not-a-participant",
            ]
        }
        assert participant_emails(call) == ["b@acme.com", "a@acme.com"]

    def test_no_participants(self):
        assert participant_emails({}) == []
        assert participant_emails({"participants": None}) == []
