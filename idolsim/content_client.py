"""Gemini client for comeback reception, trainee profiles and song titles."""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

from .config import ContentSettings, settings
from .models import Concept, IdolPosition, IdolStats, ReleaseStyle
from .titles import random_song_title

logger = logging.getLogger(__name__)

# Retry decorator for transient failures
_retry_on_network_error = retry(
    stop=stop_after_attempt(settings.content.max_attempts),
    wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
    retry=retry_if_exception_type((httpx.RequestError, httpx.TimeoutException)),
    reraise=True,
)


class ContentServiceError(RuntimeError):
    """Raised when the content service returns an error or unusable payload."""


@dataclass
class ComebackOutcome:
    """How a new release is received."""
    quality_score: int
    concept_match: int
    critic_score: int
    public_score: int
    review_summary: str
    tracklist: List[str] = field(default_factory=list)
    netizen_comments: List[str] = field(default_factory=list)

    @classmethod
    def fallback(cls) -> "ComebackOutcome":
        return cls(
            quality_score=60,
            concept_match=70,
            critic_score=65,
            public_score=70,
            review_summary="A standard release that plays it safe.",
            tracklist=["Intro", "B-side 1", "B-side 2", "Outro"],
            netizen_comments=["Not bad!", "Expected more...", "The beat is catchy."],
        )


@dataclass
class TraineeProfile:
    name: str
    age: int
    stats: IdolStats
    position: IdolPosition


def fallback_trainees() -> List[TraineeProfile]:
    return [
        TraineeProfile(
            name="Minji",
            age=16,
            stats=IdolStats(vocal=40, dance=50, rap=20, visual=60, charisma=45),
            position=IdolPosition.VISUAL,
        )
    ]


TRAINEE_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "trainees": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "age": {"type": "INTEGER"},
                    "vocal": {"type": "INTEGER"},
                    "dance": {"type": "INTEGER"},
                    "rap": {"type": "INTEGER"},
                    "visual": {"type": "INTEGER"},
                    "charisma": {"type": "INTEGER"},
                    "mainPosition": {"type": "STRING"},
                },
                "required": ["name", "age", "vocal", "dance", "rap", "visual", "charisma", "mainPosition"],
            },
        },
    },
}

COMEBACK_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "qualityScore": {"type": "INTEGER", "description": "Song quality 1-100"},
        "conceptMatch": {"type": "INTEGER", "description": "How well the concept fits trends (0-100)"},
        "criticScore": {"type": "INTEGER", "description": "Metacritic score 0-100"},
        "publicScore": {"type": "INTEGER", "description": "Public rating 0-100"},
        "reviewSummary": {"type": "STRING", "description": "One sentence review from a critic"},
        "tracklist": {"type": "ARRAY", "items": {"type": "STRING"}},
        "netizenComments": {"type": "ARRAY", "items": {"type": "STRING"}},
    },
    "required": [
        "qualityScore", "conceptMatch", "criticScore", "publicScore",
        "reviewSummary", "tracklist", "netizenComments",
    ],
}


def _clamp_int(value: Any, lo: int, hi: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(lo, min(hi, number))


class ContentClient:
    """Client for the Gemini generateContent API."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        content_settings: Optional[ContentSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self._settings = content_settings or settings.content
        self._api_key = api_key if api_key is not None else self._settings.api_key
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _get_headers(self) -> dict:
        if not self._api_key:
            raise ContentServiceError(
                "Content service not configured. "
                f"Set the {self._settings.api_key_env_var} environment variable."
            )
        return {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    @_retry_on_network_error
    def _make_request(self, url: str, body: dict) -> httpx.Response:
        """Make HTTP request with retry logic for transient failures."""
        with httpx.Client(timeout=self._settings.timeout_seconds, transport=self._transport) as client:
            return client.post(url, headers=self._get_headers(), json=body)

    def _generate(self, prompt: str, schema: Optional[dict] = None, temperature: Optional[float] = None) -> str:
        """Run one generateContent call and return the first candidate's text."""
        url = f"{self._settings.api_base_url}/models/{self._settings.model}:generateContent"
        generation_config: Dict[str, Any] = {}
        if schema is not None:
            generation_config["responseMimeType"] = "application/json"
            generation_config["responseSchema"] = schema
        if temperature is not None:
            generation_config["temperature"] = temperature

        body: Dict[str, Any] = {"contents": [{"parts": [{"text": prompt}]}]}
        if generation_config:
            body["generationConfig"] = generation_config

        response = self._make_request(url, body)
        logger.info("Content API: %s %s", response.status_code, url)

        if response.status_code >= 400:
            raise ContentServiceError(f"Content API error: {response.status_code}")

        try:
            data = response.json()
            return data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise ContentServiceError(f"Malformed content API response: {e}") from e

    def _generate_json(self, prompt: str, schema: dict, temperature: Optional[float] = None) -> dict:
        text = self._generate(prompt, schema=schema, temperature=temperature)
        try:
            payload = json.loads(text or "{}")
        except ValueError as e:
            raise ContentServiceError(f"Content API returned invalid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ContentServiceError("Content API returned a non-object payload")
        return payload

    def generate_comeback_outcome(
        self,
        group_name: str,
        concept: Concept,
        style: ReleaseStyle,
        title: str,
        avg_skill: float,
        fandom_size: int,
        budget: int,
    ) -> ComebackOutcome:
        """Simulate critical and public reception of a new release.

        Falls back to ComebackOutcome.fallback() when the service is not
        configured or the call fails for any network or payload reason.
        """
        if not self.configured:
            logger.warning("Content service not configured, using default comeback outcome")
            return ComebackOutcome.fallback()

        prompt = (
            "Simulate K-pop release reception.\n"
            f"Group: {group_name}\n"
            f'Song: "{title}"\n'
            f"Concept: {concept.value}\n"
            f"Style: {style.value} (Conceptual implies high critic score, Commercial implies mass appeal)\n"
            f"Avg Skill: {avg_skill:.1f}\n"
            f"Fandom Size: {fandom_size}\n"
            f"Budget: {budget}\n\n"
            "Return JSON with qualityScore (1-100), conceptMatch (1-100), criticScore (0-100), "
            "publicScore (0-100), reviewSummary (1 short sentence), tracklist (3-6 B-side titles "
            "fitting the concept) and netizenComments (3 realistic netizen comments)."
        )

        try:
            data = self._generate_json(prompt, COMEBACK_SCHEMA)
        except (httpx.RequestError, httpx.TimeoutException) as e:
            logger.error("Comeback outcome request failed after retries: %s", e)
            return ComebackOutcome.fallback()
        except ContentServiceError as e:
            logger.warning("Comeback outcome unavailable: %s", e)
            return ComebackOutcome.fallback()

        default = ComebackOutcome.fallback()
        tracklist = [str(t) for t in data.get("tracklist") or []]
        comments = [str(c) for c in data.get("netizenComments") or []][:3]
        return ComebackOutcome(
            quality_score=_clamp_int(data.get("qualityScore"), 1, 100, default.quality_score),
            concept_match=_clamp_int(data.get("conceptMatch"), 0, 100, default.concept_match),
            critic_score=_clamp_int(data.get("criticScore"), 0, 100, default.critic_score),
            public_score=_clamp_int(data.get("publicScore"), 0, 100, default.public_score),
            review_summary=str(data.get("reviewSummary") or default.review_summary),
            tracklist=tracklist or default.tracklist,
            netizen_comments=comments or default.netizen_comments,
        )

    def generate_trainees(self, count: int) -> List[TraineeProfile]:
        """Generate fictional trainee profiles."""
        if count < 1:
            raise ValueError(f"count must be positive, got {count}")

        if not self.configured:
            logger.warning("Content service not configured, using default trainees")
            return fallback_trainees()

        prompt = (
            f"Generate {count} fictional K-pop trainee profiles. Names should be realistic Korean "
            "or English stage names. Stats should be between 10 and 70."
        )

        try:
            data = self._generate_json(prompt, TRAINEE_SCHEMA, temperature=1.0)
        except (httpx.RequestError, httpx.TimeoutException) as e:
            logger.error("Trainee request failed after retries: %s", e)
            return fallback_trainees()
        except ContentServiceError as e:
            logger.warning("Trainee generation unavailable: %s", e)
            return fallback_trainees()

        trainees = []
        for item in data.get("trainees") or []:
            try:
                trainees.append(self._parse_trainee(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("Failed to parse trainee item: %s", e)
                continue

        if not trainees:
            logger.warning("Content service returned no usable trainees, using defaults")
            return fallback_trainees()
        return trainees[:count]

    def _parse_trainee(self, item: dict) -> TraineeProfile:
        try:
            position = IdolPosition(item.get("mainPosition"))
        except ValueError:
            position = IdolPosition.VOCAL
        return TraineeProfile(
            name=str(item["name"]),
            age=_clamp_int(item.get("age"), 12, 30, 17),
            stats=IdolStats(
                vocal=_clamp_int(item.get("vocal"), 0, 100, 30),
                dance=_clamp_int(item.get("dance"), 0, 100, 30),
                rap=_clamp_int(item.get("rap"), 0, 100, 30),
                visual=_clamp_int(item.get("visual"), 0, 100, 30),
                charisma=_clamp_int(item.get("charisma"), 0, 100, 30),
            ),
            position=position,
        )

    def generate_song_title(self, concept: Concept, rng: Optional[random.Random] = None) -> str:
        """Ask for a catchy title; use the local table if the service is unavailable."""
        if not self.configured:
            return random_song_title(concept, rng)

        prompt = (
            f"Generate a catchy K-pop song title for a {concept.value} concept. "
            "Return ONLY the title string, nothing else. No quotes."
        )
        try:
            text = self._generate(prompt)
        except (httpx.RequestError, httpx.TimeoutException, ContentServiceError) as e:
            logger.warning("Song title generation failed: %s", e)
            return random_song_title(concept, rng)

        title = text.strip().replace('"', "")
        return title or random_song_title(concept, rng)


# Global client instance
content_client = ContentClient()
