from __future__ import annotations

import asyncio

import pytest

from persistence.disk_store import DiskJsonDocumentStore
from persistence.redis_store import RedisDocumentStore
from persistence.repositories import AsyncDocumentMatchRepository, create_document_store
from persistence.scoreboard_state import (
    DocumentMatchStateRepository,
    MatchSetup,
    ScoreboardPatch,
    batting_team_for,
    match_id_for,
    total_runs_text,
)
from settings import get_settings


def _setup(**overrides) -> MatchSetup:
    body = {
        "organizerName": "Org",
        "matchNumber": 1,
        "teamA": "A",
        "teamB": "B",
        "tossWinner": "A",
        "tossDecision": "Bat",
    }
    body.update(overrides)
    return MatchSetup.model_validate(body)


def test_async_document_repository_basic_flow(scoreboard_path):
    async def _run():
        repo = AsyncDocumentMatchRepository(DiskJsonDocumentStore(scoreboard_path))

        assert await repo.get_match("match1") is None

        match_id = await repo.create_match(_setup())
        assert match_id == "match1"

        rec = await repo.get_match("match1")
        assert rec is not None
        assert rec["current_batting_team"] == "A"
        assert rec["toss"] == "A won and chose to Bat"

        assert await repo.merge_match("match1", {"bowler_name": "Khan"}) is True
        rec = await repo.get_match("match1")
        assert rec["bowler_name"] == "Khan"
        assert rec["striker_name"] == "Striker"

        assert await repo.set_total_runs("match1", 120) is True
        assert (await repo.get_match("match1"))["team1_runs"] == "120"

        assert await repo.merge_match("match2", {"bowler_name": "X"}) is False
        assert await repo.set_total_runs("match2", 1) is False
        assert await repo.get_match("match2") is None

    asyncio.run(_run())


def test_concurrent_merges_on_one_document_are_not_lost(scoreboard_path):
    async def _run():
        repo = AsyncDocumentMatchRepository(DiskJsonDocumentStore(scoreboard_path))
        await repo.create_match(_setup())

        fields = [f"note_{i}" for i in range(20)]
        await asyncio.gather(*(repo.merge_match("match1", {f: "x"}) for f in fields))

        rec = await repo.get_match("match1")
        assert all(rec[f] == "x" for f in fields)

    asyncio.run(_run())


@pytest.mark.parametrize(
    "winner, decision, expected",
    [
        ("A", "Bat", "A"),
        ("A", "Field", "B"),
        ("B", "Bat", "B"),
        ("B", "Field", "A"),
    ],
)
def test_batting_team_derivation(winner, decision, expected):
    assert batting_team_for(team_a="A", team_b="B", toss_winner=winner, toss_decision=decision) == expected


def test_unknown_toss_winner_falls_through_to_team_a():
    assert batting_team_for(team_a="A", team_b="B", toss_winner="C", toss_decision="Field") == "A"


def test_match_id_depends_only_on_number():
    assert match_id_for(7) == "match7"
    assert _setup(matchNumber=7, teamA="X", teamB="Y", tossWinner="Y").match_id == "match7"
    assert _setup(matchNumber="7").match_id == "match7"


def test_create_document_store_prefers_redis(monkeypatch, sandbox_project):
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")
    monkeypatch.setenv("SCOREBOARD_KEY", "otherKey")
    store = create_document_store(get_settings())
    assert isinstance(store, RedisDocumentStore)
    assert store.key == "otherKey"


def test_create_document_store_defaults_to_disk(sandbox_project):
    store = create_document_store(get_settings())
    assert isinstance(store, DiskJsonDocumentStore)
    assert store.path == sandbox_project / "data" / "scoreboard.json"


class _StaticStore:
    key = "static"

    def __init__(self, doc):
        self.doc = doc
        self.saved = []

    def load(self):
        return self.doc

    def save(self, doc):
        self.saved.append(doc)

    def close(self):
        pass


def test_unexpected_document_shape_loads_as_empty(caplog):
    repo = DocumentMatchStateRepository(_StaticStore({"matches": {1: {"team1_runs": "3"}}}))
    with caplog.at_level("WARNING"):
        assert repo.get_match("match1") is None
    assert "SCOREBOARD LOAD" in caplog.text


def test_loose_stored_values_are_returned_as_stored():
    stored = {"team1_runs": 42, "striker_name": None, "overs": ["1", "2"], "note": "x"}
    store = _StaticStore({"tournament_organizer": 5, "matches": {"match1": stored}})
    repo = DocumentMatchStateRepository(store)

    assert repo.get_match("match1") == stored

    assert repo.merge_match("match1", {"note": "y"}) is True
    saved = store.saved[-1]
    assert saved["tournament_organizer"] == 5
    assert saved["matches"]["match1"] == {**stored, "note": "y"}


def test_setup_accepts_numeric_values():
    setup = MatchSetup.model_validate(
        {"matchNumber": 2.0, "teamA": 11, "teamB": 22, "tossWinner": 11, "tossDecision": "Field"}
    )
    assert setup.match_id == "match2"
    assert setup.team_a == "11"
    assert setup.batting_team == "22"
    assert setup.toss_summary == "11 won and chose to Field"


def test_patch_keeps_only_sent_fields_as_text():
    patch = ScoreboardPatch.model_validate({"striker_runs": 12.0, "team1_extra": 3, "free_hit": True})
    assert patch.changes() == {"striker_runs": "12", "team1_extra": "3", "free_hit": "true"}


@pytest.mark.parametrize(
    "value, expected",
    [(57, "57"), (12.0, "12"), (12.5, "12.5"), ("81", "81"), (None, "null"), (False, "false")],
)
def test_total_runs_text(value, expected):
    assert total_runs_text(value) == expected
