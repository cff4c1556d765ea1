"""
Narrative generation boundary.

The engine hands a NarrativeClient pre-aggregated summaries (never raw
workouts) and gets back free text that should contain a JSON object. Only
the labeled fields asked for in the system prompt are extracted; the prose
itself is passed through untouched.
"""
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from application.ports import NarrativeClient
from backend.core.arena_service import ArenaResult
from backend.core.errors import NarrativeUnavailableError
from backend.core.progress_report import ProgressReport

logger = logging.getLogger(__name__)


ARENA_SYSTEM_PROMPT = """You are a strength coach commentating a training competition.
You receive a JSON summary with rankings by total volume, head-to-head duels on shared
exercises, a best-lift matrix and each athlete's muscle-group focus.
If "is_draw" is true, there is no single winner: describe the result as a draw.
A duel whose winner is "EMPATE" is a tie on that exercise.

Return ONLY a JSON object:
{
  "winner": "Name of the overall winner, or DRAW",
  "narrative": "Markdown commentary of the competition"
}"""

PROGRESS_SYSTEM_PROMPT = """You are a constructive, technical strength coach.
You receive a JSON summary of an athlete's lifetime and monthly training volume and a
comparison of all-time vs. this month's best sets per exercise.

Return ONLY a JSON object:
{
  "equiv_global": "Amount + a witty object equivalent to the lifetime volume",
  "equiv_monthly": "Amount + a witty object equivalent to this month's volume",
  "analysis": "Markdown analysis of the month with three concrete improvements",
  "score": 1-10
}"""

# Field names accepted for each NarrativeResult attribute
_NARRATIVE_KEYS = ("narrative", "analysis")
_GLOBAL_KEYS = ("equivalence_global", "equiv_global")
_MONTHLY_KEYS = ("equivalence_monthly", "equiv_monthly")


@dataclass(frozen=True)
class NarrativeResult:
    """Narrative text plus the labeled fields the engine asked for."""
    narrative: str
    winner: Optional[str] = None
    equivalence_global: Optional[str] = None
    equivalence_monthly: Optional[str] = None
    score: Optional[int] = None


def extract_json_object(text: str) -> Dict[str, Any]:
    """
    Pull the JSON object out of a model response.

    Strips markdown code fences and anything before the first ``{`` or after
    the last ``}``.

    Raises:
        ValueError: If no JSON object can be decoded
    """
    content = (text or "").strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else ""
    if content.endswith("```"):
        content = content.rsplit("```", 1)[0]

    start, end = content.find("{"), content.rfind("}")
    if start == -1 or end <= start:
        raise ValueError("No JSON object in response")

    data = json.loads(content[start:end + 1])
    if not isinstance(data, dict):
        raise ValueError("Response JSON is not an object")
    return data


def _first_text(data: Dict[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def _score(value: Any) -> Optional[int]:
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError):
        return None
    return score if 1 <= score <= 10 else None


def parse_narrative(text: str) -> NarrativeResult:
    """
    Build a NarrativeResult from a raw model response.

    An unparseable response is kept whole as the narrative, with no labeled
    fields.
    """
    try:
        data = extract_json_object(text)
    except ValueError as e:  # json.JSONDecodeError included
        logger.warning(f"Failed to parse narrative response as JSON: {e}")
        return NarrativeResult(narrative=text or "")

    winner = data.get("winner")
    return NarrativeResult(
        narrative=_first_text(data, _NARRATIVE_KEYS) or "",
        winner=winner if isinstance(winner, str) and winner else None,
        equivalence_global=_first_text(data, _GLOBAL_KEYS),
        equivalence_monthly=_first_text(data, _MONTHLY_KEYS),
        score=_score(data.get("score")),
    )


class NarrativeService:
    """
    Turns arena results and progress reports into narrative text.

    Usage:
        service = NarrativeService(client)
        result = service.narrate_arena(arena_result)
        print(result.winner, result.narrative)
    """

    def __init__(self, client: NarrativeClient):
        self._client = client

    def _generate(self, system_prompt: str, payload: Dict[str, Any]) -> NarrativeResult:
        try:
            raw = self._client.generate(system_prompt, payload)
        except Exception as e:
            logger.error(f"Narrative client failed: {e}")
            raise NarrativeUnavailableError(str(e)) from e
        return parse_narrative(raw)

    def narrate_arena(self, result: ArenaResult) -> NarrativeResult:
        return self._generate(ARENA_SYSTEM_PROMPT, result.to_summary())

    def narrate_progress(
        self, report: ProgressReport, body_weight_kg: Optional[float] = None
    ) -> NarrativeResult:
        return self._generate(PROGRESS_SYSTEM_PROMPT, report.to_summary(body_weight_kg))
