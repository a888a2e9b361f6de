"""Keyword-based content analysis — energy, keywords, features, scene roles.

No models involved: every score comes from fixed vocabularies and simple
text statistics, so identical input always yields identical output.
"""

from __future__ import annotations

import re
from collections import Counter

from .duration import synthesize_duration
from .models.content import ContentAnalysis, ContentFeatures, SceneAnalysis
from .types import Complexity, SceneRole

BASELINE_ENERGY = 0.5
ENERGY_STEP = 0.1

HIGH_ENERGY_WORDS = (
    "fast", "quick", "rapid", "action", "dynamic", "power", "explosive",
    "exciting", "intense", "aggressive", "bold", "dramatic", "impact", "energetic",
)
LOW_ENERGY_WORDS = (
    "calm", "gentle", "smooth", "soft", "subtle", "quiet", "peaceful",
    "elegant", "graceful", "slow", "relaxed", "minimal", "serene", "simple",
)

# Words anchored at their start: "calmly" counts as calm, "breakfast" is not fast.
_HIGH_RE = [re.compile(rf"\b{word}") for word in HIGH_ENERGY_WORDS]
_LOW_RE = [re.compile(rf"\b{word}") for word in LOW_ENERGY_WORDS]

_PUNCT_RE = re.compile(r"[^\w\s]")
_CODE_HINT_RE = re.compile(r"```|code|function|class|const|import")
_LIST_HINT_RE = re.compile(r"\n-|\n\d\.|\n\*")

_FEATURE_PATTERNS = {
    "has_technical_content": re.compile(r"code|api|function|class|developer|technical|software", re.I),
    "has_list_content": re.compile(r"features|benefits|steps|\n-|\n\d\.", re.I),
    "has_code_examples": re.compile(r"```|function|const|import|export|class", re.I),
    "has_questions": re.compile(r"\?|how to|what is|why|when", re.I),
    "has_call_to_action": re.compile(r"start|try|get|download|sign up|learn more|contact", re.I),
}

READING_WPM = 180
MIN_RECOMMENDED_FRAMES = 60
MAX_RECOMMENDED_FRAMES = 120


def detect_energy(text: str) -> float:
    """Score *text* energy in ``[0, 1]`` from the two keyword buckets.

    Starts at 0.5; each distinct high-energy word adds 0.1 and each distinct
    low-energy word subtracts 0.1.
    """
    lowered = text.lower()
    high = sum(1 for pattern in _HIGH_RE if pattern.search(lowered))
    low = sum(1 for pattern in _LOW_RE if pattern.search(lowered))
    energy = BASELINE_ENERGY + (high - low) * ENERGY_STEP
    return round(max(0.0, min(1.0, energy)), 4)


def extract_keywords(text: str, limit: int = 10) -> list[str]:
    """Return the most frequent words longer than three characters.

    Ties keep first-occurrence order.
    """
    words = [w for w in _PUNCT_RE.sub("", text.lower()).split() if len(w) > 3]
    return [word for word, _ in Counter(words).most_common(limit)]


def extract_features(text: str) -> ContentFeatures:
    return ContentFeatures(**{name: bool(p.search(text)) for name, p in _FEATURE_PATTERNS.items()})


def estimate_complexity(text: str, scene_count: int) -> Complexity:
    word_count = len(text.split())
    has_code = bool(_CODE_HINT_RE.search(text))
    has_list = bool(_LIST_HINT_RE.search(text))
    if scene_count == 1 and word_count < 50 and not has_code and not has_list:
        return "simple"
    if scene_count > 4 or word_count > 200 or (has_code and has_list):
        return "complex"
    return "medium"


def analyze_content(text: str, scene_count: int = 1) -> ContentAnalysis:
    """Analyze a whole brief.

    Args:
        text: Free-text content, usually every scene text joined.
        scene_count: Number of scenes the text spans; drives complexity and
            the synthesized duration.

    Returns:
        ContentAnalysis with energy, keywords, features and duration.

    Raises:
        ValueError: If ``scene_count <= 0``.
    """
    duration = synthesize_duration(scene_count)
    word_count = len(text.split())
    return ContentAnalysis(
        energy=detect_energy(text),
        keywords=extract_keywords(text),
        features=extract_features(text),
        complexity=estimate_complexity(text, scene_count),
        scene_count=scene_count,
        reading_seconds=round(word_count / READING_WPM * 60, 2),
        calculated_duration=duration,
    )


def detect_scene_role(index: int, total: int) -> SceneRole:
    """First scene is the intro, last is the outro, everything else is body."""
    if index == 0:
        return "intro"
    if index == total - 1:
        return "outro"
    return "body"


def jaccard_similarity(first: str, second: str) -> float:
    """Word-set overlap ``|A & B| / |A | B|``; 0 when both texts are empty."""
    a = set(first.lower().split())
    b = set(second.lower().split())
    union = a | b
    if not union:
        return 0.0
    return round(len(a & b) / len(union), 4)


def recommended_duration(energy: float) -> int:
    """Hold length in frames: 120 at energy 0, 60 at energy 1."""
    frames = round(MAX_RECOMMENDED_FRAMES - (MAX_RECOMMENDED_FRAMES - MIN_RECOMMENDED_FRAMES) * energy)
    return max(MIN_RECOMMENDED_FRAMES, min(MAX_RECOMMENDED_FRAMES, frames))


def analyze_scenes(scenes: list[str]) -> list[SceneAnalysis]:
    """Per-scene role, energy, keywords and similarity to the next scene."""
    total = len(scenes)
    results: list[SceneAnalysis] = []
    for index, text in enumerate(scenes):
        energy = detect_energy(text)
        similarity = jaccard_similarity(text, scenes[index + 1]) if index + 1 < total else 0.0
        results.append(SceneAnalysis(
            scene_index=index,
            content=text,
            energy=energy,
            keywords=extract_keywords(text),
            scene_role=detect_scene_role(index, total),
            similarity_to_next=similarity,
            recommended_duration=recommended_duration(energy),
        ))
    return results
