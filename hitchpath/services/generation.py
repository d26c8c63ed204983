"""Learning-path generation: prompt building, oracle call, reply parsing."""
import json
import logging
import re
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from hitchpath.core.errors import GenerationError
from hitchpath.schemas.path import GeneratedSteps, Step, canonical_step_id
from hitchpath.schemas.user import LearningPreferences
from hitchpath.services.oracle import Oracle

logger = logging.getLogger(__name__)

DEFAULT_CAREER_PATH = "General learning"

# First "{" to last "}" of the reply, across lines.
JSON_SPAN_RE = re.compile(r"\{[\s\S]*\}")

STEP_FORMAT = """{
  "steps": [
    {
      "id": 1,
      "title": "Step title",
      "description": "Step description",
      "milestone": "Step milestone",
      "tips": ["Tip 1", "Tip 2"],
      "resources": [
        { "title": "Resource Title", "url": "https://example.com" }
      ]
    }
  ]
}"""

PREFERENCES_PROMPT = """Based on the following user preferences:
- Career Path: {career_path}
- Current Skill Level: {skill_level}
- Preferred Learning Style: {learning_style}

Generate a personalized learning path with actionable steps, tips, milestones, and recommended resources (with titles and URLs). Return only a JSON object in this format:

{step_format}
"""

TOPIC_PROMPT = """The user wants to master the topic "{topic}".
Details: {details}

Generate a personalized learning path with actionable steps, tips, milestones, and recommended resources (with titles and URLs). Return only a JSON object in this format:

{step_format}
"""


def build_preferences_prompt(prefs: LearningPreferences) -> str:
    career_path = (prefs.career_path or "").strip() or DEFAULT_CAREER_PATH
    return PREFERENCES_PROMPT.format(
        career_path=career_path,
        skill_level=prefs.current_skill_level,
        learning_style=prefs.preferred_learning_style,
        step_format=STEP_FORMAT,
    )


def build_topic_prompt(topic: str, details: str) -> str:
    return TOPIC_PROMPT.format(
        topic=topic.strip(),
        details=(details or "").strip() or "none given",
        step_format=STEP_FORMAT,
    )


def extract_json_object(text: str | None) -> Any:
    """Parse the first-"{"-to-last-"}" span of a free-text reply."""
    match = JSON_SPAN_RE.search(text or "")
    if match is None:
        raise GenerationError("no JSON found")
    try:
        return json.loads(match.group(0))
    except json.JSONDecodeError as exc:
        raise GenerationError("invalid JSON") from exc


def _assign_ordinal_ids(raw_steps: list) -> list:
    """Give every step an ordinal id if any id is missing or repeated."""
    seen = set()
    for raw in raw_steps:
        if not isinstance(raw, dict):
            return raw_steps  # left for schema validation to reject
        try:
            key = canonical_step_id(raw.get("id"))
        except ValueError:
            break
        if key in seen:
            break
        seen.add(key)
    else:
        return raw_steps
    return [{**raw, "id": str(position)} for position, raw in enumerate(raw_steps, start=1)]


def parse_steps(payload: Any) -> list[Step]:
    """Validate a parsed reply against the step contract."""
    if not isinstance(payload, dict) or not isinstance(payload.get("steps"), list):
        raise GenerationError("invalid learning path: missing 'steps' list")
    raw_steps = _assign_ordinal_ids(payload["steps"])
    try:
        envelope = GeneratedSteps.model_validate({"steps": raw_steps})
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        where = ".".join(str(part) for part in first.get("loc", ()))
        raise GenerationError(f"invalid learning path: {where}: {first.get('msg')}") from exc
    return envelope.steps


class GenerationGateway:
    """Turns preferences or a topic request into a validated list of steps.

    Every call is a single, uncached oracle request. Any failure surfaces as
    GenerationError; nothing here touches storage.
    """

    def __init__(self, oracle: Oracle, json_mode: bool = True):
        self.oracle = oracle
        self.json_mode = json_mode

    async def generate_from_preferences(self, prefs: LearningPreferences) -> list[Step]:
        return await self._generate(build_preferences_prompt(prefs))

    async def generate_for_topic(self, topic: str, details: str = "") -> list[Step]:
        return await self._generate(build_topic_prompt(topic, details))

    async def _generate(self, prompt: str) -> list[Step]:
        reply = await self.oracle.complete(prompt, json_mode=self.json_mode)
        logger.debug("Oracle replied with %d characters", len(reply or ""))
        try:
            steps = parse_steps(extract_json_object(reply))
        except GenerationError as exc:
            logger.warning("Discarding oracle reply: %s", exc.message)
            raise
        logger.info("Generated learning path with %d steps", len(steps))
        return steps
