from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .interfaces import KeyValueDocumentStore
from .locks import GLOBAL_KEY_LOCKS

logger = logging.getLogger(__name__)

BAT_DECISION = "Bat"

# Stored records are kept exactly as they were read; only client input is normalized.
MatchRecord = dict[str, Any]


def _as_text(value: Any) -> Any:
    # Scoreboard values are text in the store, even when clients send numbers.
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(_as_text(value))


def total_runs_text(value: Any) -> str:
    return "null" if value is None else _text(value)


class ScoreboardPatch(BaseModel):
    """
    Partial match record for a shallow merge. Known fields are named; anything else a
    client sends is kept as an extra key. Only the fields actually sent are applied.
    """

    model_config = ConfigDict(extra="allow")

    team1_name: str | None = None
    team2_name: str | None = None
    toss: str | None = None
    team1_runs: str | None = None
    team1_wickets: str | None = None
    team1_extra: str | None = None
    overs: str | None = None
    current_batting_team: str | None = None
    striker_name: str | None = None
    striker_runs: str | None = None
    striker_bolls: str | None = None
    non_striker_name: str | None = None
    non_striker_runs: str | None = None
    non_striker_bolls: str | None = None
    bowler_name: str | None = None

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    def changes(self) -> dict[str, Any]:
        sent = set(self.model_fields_set) | set(self.model_extra or {})
        return {k: _as_text(v) for k, v in self.model_dump(mode="json").items() if k in sent}


class MatchSetup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    organizer_name: Any = Field(default=None, alias="organizerName")
    match_number: Any = Field(default=None, alias="matchNumber")
    team_a: Any = Field(default=None, alias="teamA")
    team_b: Any = Field(default=None, alias="teamB")
    toss_winner: Any = Field(default=None, alias="tossWinner")
    toss_decision: Any = Field(default=None, alias="tossDecision")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @property
    def match_id(self) -> str:
        return match_id_for(self.match_number)

    @property
    def batting_team(self) -> Any:
        return batting_team_for(
            team_a=self.team_a,
            team_b=self.team_b,
            toss_winner=self.toss_winner,
            toss_decision=self.toss_decision,
        )

    @property
    def toss_summary(self) -> str:
        return f"{_text(self.toss_winner)} won and chose to {_text(self.toss_decision)}"


class ScoreboardDocument(BaseModel):
    """
    Mirrors the stored document:
      {
        "tournament_organizer": "...",
        "matches": { "match<N>": {...} }
      }

    Match entries and unknown top-level keys are carried through untouched, so a write
    only changes the entry it targets.
    """

    model_config = ConfigDict(extra="allow")

    tournament_organizer: Any = None
    matches: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_store_doc(cls, doc: Mapping[str, Any]) -> "ScoreboardDocument":
        matches = doc.get("matches")
        if not isinstance(matches, dict):
            matches = {}
        return cls.model_validate({**doc, "matches": matches})

    def to_store_doc(self) -> dict[str, Any]:
        doc = {**(self.model_extra or {}), "matches": self.matches}
        if self.tournament_organizer is not None:
            doc["tournament_organizer"] = self.tournament_organizer
        return doc

    def match(self, match_id: str) -> MatchRecord | None:
        rec = self.matches.get(match_id)
        return rec if isinstance(rec, dict) else None


def match_id_for(match_number: Any) -> str:
    return f"match{_text(match_number)}"


def batting_team_for(
    *,
    team_a: Any,
    team_b: Any,
    toss_winner: Any,
    toss_decision: Any,
) -> Any:
    """
    The toss winner bats if they chose to; otherwise the other side does.

    A toss winner matching neither team is not rejected: anything other than team_a
    is treated as team_b winning, so team_a bats.
    """
    if toss_decision == BAT_DECISION:
        return toss_winner
    return team_b if toss_winner == team_a else team_a


def initial_match_record(setup: MatchSetup) -> MatchRecord:
    record = {
        "team1_name": setup.team_a,
        "team2_name": setup.team_b,
        "toss": setup.toss_summary,
        "team1_runs": "0",
        "team1_wickets": "0",
        "team1_extra": "0",
        "overs": "0.0",
        "current_batting_team": setup.batting_team,
        "striker_name": "Striker",
        "striker_runs": "0",
        "striker_bolls": "0",
        "non_striker_name": "Non-Striker",
        "non_striker_runs": "0",
        "non_striker_bolls": "0",
        "bowler_name": "Bowler",
    }
    # Fields missing from the setup request are left out, not stored as null.
    return {k: v for k, v in record.items() if v is not None}


class MatchStateRepository(Protocol):
    def get_match(self, match_id: str) -> MatchRecord | None:
        ...

    def merge_match(self, match_id: str, patch: Mapping[str, Any]) -> bool:
        ...

    def set_total_runs(self, match_id: str, total_runs: Any) -> bool:
        ...

    def create_match(self, setup: MatchSetup) -> str:
        ...


class DocumentMatchStateRepository(MatchStateRepository):
    """
    Every operation reads the whole document from the store; writes put the whole
    document back. Read-modify-write cycles on the same key are serialized in-process.
    """

    def __init__(self, store: KeyValueDocumentStore):
        self._store = store

    @property
    def store(self) -> KeyValueDocumentStore:
        return self._store

    def _load(self) -> ScoreboardDocument:
        try:
            return ScoreboardDocument.from_store_doc(self._store.load())
        except ValidationError as e:
            logger.warning("SCOREBOARD LOAD: stored document has an unexpected shape: %r", e)
            return ScoreboardDocument()

    def _save(self, doc: ScoreboardDocument) -> None:
        self._store.save(doc.to_store_doc())

    def get_match(self, match_id: str) -> MatchRecord | None:
        return self._load().match(match_id)

    def merge_match(self, match_id: str, patch: Mapping[str, Any]) -> bool:
        with GLOBAL_KEY_LOCKS.lock_for(self._store.key):
            doc = self._load()
            current = doc.match(match_id)
            if current is None:
                return False
            doc.matches[match_id] = {**current, **dict(patch)}
            self._save(doc)
            return True

    def set_total_runs(self, match_id: str, total_runs: Any) -> bool:
        with GLOBAL_KEY_LOCKS.lock_for(self._store.key):
            doc = self._load()
            current = doc.match(match_id)
            if current is None:
                return False
            current["team1_runs"] = total_runs_text(total_runs)
            self._save(doc)
            return True

    def create_match(self, setup: MatchSetup) -> str:
        match_id = setup.match_id
        with GLOBAL_KEY_LOCKS.lock_for(self._store.key):
            doc = self._load()
            doc.tournament_organizer = setup.organizer_name
            doc.matches[match_id] = initial_match_record(setup)
            self._save(doc)
        return match_id
