"""
Narrative Client Interface (Port).

This module defines the abstract interface for the text-generation service
that turns pre-aggregated statistics into narrative text.
"""
from typing import Any, Dict, Protocol


class NarrativeClient(Protocol):
    """
    Abstract interface for an LLM-backed narrative generator.

    The engine only ever hands it plain, JSON-serializable summaries, never
    raw workouts.
    """

    def generate(self, system_prompt: str, payload: Dict[str, Any]) -> str:
        """
        Generate narrative text for a summary.

        Args:
            system_prompt: Instructions, including the JSON fields to return
            payload: JSON-serializable summary of the statistics to narrate

        Returns:
            Raw model output (expected to contain a JSON object)
        """
        ...
