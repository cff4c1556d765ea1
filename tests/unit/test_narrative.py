"""
Unit tests for the narrative boundary.
"""
from datetime import date

import pytest

from backend.ai.narrative import (
    ARENA_SYSTEM_PROMPT,
    NarrativeResult,
    NarrativeService,
    extract_json_object,
    parse_narrative,
)
from backend.core.arena_service import rank
from backend.core.catalog import load_static_catalog
from backend.core.errors import NarrativeUnavailableError
from backend.core.progress_report import build_progress_report
from tests.fakes import FakeNarrativeClient, create_workout


@pytest.mark.unit
class TestExtractJson:
    def test_plain_json(self):
        assert extract_json_object('{"winner": "Ana"}') == {"winner": "Ana"}

    def test_fenced_json(self):
        text = '```json\n{"winner": "Ana", "narrative": "Gran duelo"}\n```'
        assert extract_json_object(text)["narrative"] == "Gran duelo"

    def test_surrounding_prose(self):
        text = 'Here you go: {"score": 7} Hope it helps!'
        assert extract_json_object(text) == {"score": 7}

    @pytest.mark.parametrize("text", ["", "no json here", "[1, 2]", "{broken"])
    def test_invalid(self, text):
        with pytest.raises(ValueError):
            extract_json_object(text)


@pytest.mark.unit
class TestParseNarrative:
    def test_labeled_fields(self):
        result = parse_narrative(
            '{"equiv_global": "12 elefantes", "equiv_monthly": "3 pianos", "analysis": "## Mes", "score": "8"}'
        )
        assert result == NarrativeResult(
            narrative="## Mes",
            equivalence_global="12 elefantes",
            equivalence_monthly="3 pianos",
            score=8,
        )

    def test_prose_passed_through(self):
        prose = "**Ana** domina.\n\n- punto"
        result = parse_narrative('{"narrative": "' + prose.replace("\n", "\\n") + '", "winner": "Ana"}')
        assert result.narrative == prose
        assert result.winner == "Ana"

    def test_out_of_range_score_dropped(self):
        assert parse_narrative('{"score": 42}').score is None
        assert parse_narrative('{"score": "great"}').score is None

    def test_unparseable_keeps_raw_text(self):
        result = parse_narrative("The model forgot the JSON.")
        assert result.narrative == "The model forgot the JSON."
        assert result.winner is None


@pytest.mark.unit
class TestNarrativeService:
    """Tests for NarrativeService with a fake client."""

    def _arena(self):
        catalog = load_static_catalog()
        return rank(
            [
                {"name": "Ana", "workouts": [create_workout("2024-05-01", [("Press Banca", [(80, 5)])])]},
                {"name": "Luis", "workouts": [create_workout("2024-05-01", [("Press Banca", [(70, 5)])])]},
            ],
            catalog,
            current_body_weight=80,
        )

    def test_narrate_arena_sends_summary(self):
        client = FakeNarrativeClient(response='{"winner": "Ana", "narrative": "Ana gana."}')
        result = NarrativeService(client).narrate_arena(self._arena())

        system_prompt, payload = client.calls[0]
        assert system_prompt == ARENA_SYSTEM_PROMPT
        assert payload["winner"] == "Ana"
        assert "workouts" not in payload
        assert result.winner == "Ana"
        assert result.narrative == "Ana gana."

    def test_narrate_progress(self):
        report = build_progress_report(
            [create_workout("2024-05-01", [("Press Banca", [(80, 5)])])],
            load_static_catalog(),
            reference_date=date(2024, 5, 1),
            current_body_weight=80,
        )
        client = FakeNarrativeClient(response='{"equiv_global": "1 vaca", "analysis": "Bien", "score": 6}')
        result = NarrativeService(client).narrate_progress(report, body_weight_kg=80)

        assert client.last_payload["monthly_volume_kg"] == 400
        assert result.equivalence_global == "1 vaca"
        assert result.score == 6

    def test_client_failure_raises(self):
        client = FakeNarrativeClient(fail_with=TimeoutError("upstream timeout"))
        with pytest.raises(NarrativeUnavailableError):
            NarrativeService(client).narrate_arena(self._arena())
