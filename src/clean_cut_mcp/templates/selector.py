"""Template matching — parse a free-text request and rank the catalog.

Score weights: keyword overlap 0.45, energy 0.15, professional tone 0.15,
colourfulness 0.10, platform bonus 0.15. Template ratings (0-10) are
normalised to 0-1 before comparison, so the maximum score is exactly 1.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from ..content import detect_energy
from ..models.templates import TemplateMatch, TemplateRecord, UserRequestAnalysis
from ..types import AspectRatio, Platform

WEIGHTS = {
    "keywords": 0.45,
    "energy": 0.15,
    "professional": 0.15,
    "colorfulness": 0.10,
    "platform": 0.15,
}

_FACTOR_LABELS = {
    "keywords": "keyword match",
    "energy": "energy fit",
    "professional": "tone fit",
    "colorfulness": "colour fit",
    "platform": "platform fit",
}

# Shortest word allowed to match by containment or shared stem.
MIN_PARTIAL_MATCH = 4

STOP_WORDS = frozenset({
    "a", "an", "the", "for", "to", "of", "and", "or", "but", "in", "on", "at", "with",
    "about", "from", "into", "that", "this", "some", "very",
})

_PLATFORM_PATTERNS: tuple[tuple[Platform, re.Pattern[str]], ...] = (
    ("youtube", re.compile(r"\b(youtube|yt)\b")),
    ("instagram", re.compile(r"\b(instagram|insta|ig)\b")),
    ("tiktok", re.compile(r"\b(tiktok|tik tok)\b")),
    ("linkedin", re.compile(r"\blinkedin\b")),
    ("twitter", re.compile(r"\btwitter\b|\bx\.com\b")),
    ("facebook", re.compile(r"\b(facebook|fb)\b")),
)

_ASPECT_PATTERNS: tuple[tuple[AspectRatio, re.Pattern[str]], ...] = (
    ("9:16", re.compile(r"\b(vertical|portrait|9:16|story|reel|short)\b")),
    ("1:1", re.compile(r"\b(square|1:1)\b")),
    ("16:9", re.compile(r"\b(horizontal|landscape|16:9)\b")),
    ("4:5", re.compile(r"\b4:5\b")),
)
_PLATFORM_ASPECT: dict[str, AspectRatio] = {
    "instagram": "9:16",
    "tiktok": "9:16",
    "youtube": "16:9",
    "linkedin": "16:9",
}

_CORPORATE_RE = re.compile(r"\b(professional|corporate|business|enterprise|investor|quarterly|formal)\b")
_PLAYFUL_RE = re.compile(r"\b(fun|playful|casual|quirky|whimsical|creative|artistic)\b")
_VIBRANT_RE = re.compile(r"\b(colou?rful|vibrant|bright|neon|rainbow|vivid|bold)\b")
_MONOCHROME_RE = re.compile(r"\b(monochrome|grayscale|greyscale|black and white|muted|dark|minimal)\b")
_DATA_RE = re.compile(r"\b(chart|graph|metrics?|numbers?|stats?|data|results?|growth|revenue|performance)\b")
_NON_WORD_RE = re.compile(r"[^\w]")


def _extract_request_keywords(lowered: str) -> list[str]:
    keywords: list[str] = []
    for raw in lowered.split():
        if len(raw) <= 2 or raw in STOP_WORDS:
            continue
        word = _NON_WORD_RE.sub("", raw)
        if word and word not in STOP_WORDS and word not in keywords:
            keywords.append(word)
    return keywords


def _detect_platform(lowered: str) -> Platform | None:
    for platform, pattern in _PLATFORM_PATTERNS:
        if pattern.search(lowered):
            return platform
    return None


def _detect_aspect_ratio(lowered: str, platform: Platform | None) -> AspectRatio | None:
    for ratio, pattern in _ASPECT_PATTERNS:
        if pattern.search(lowered):
            return ratio
    return _PLATFORM_ASPECT.get(platform or "")


def analyze_user_request(prompt: str) -> UserRequestAnalysis:
    """Extract matching criteria from a free-text request."""
    lowered = prompt.lower()
    platform = _detect_platform(lowered)

    if _CORPORATE_RE.search(lowered):
        professional = 0.9
    elif _PLAYFUL_RE.search(lowered):
        professional = 0.3
    else:
        professional = 0.6

    if _VIBRANT_RE.search(lowered):
        colorfulness = 0.9
    elif _MONOCHROME_RE.search(lowered):
        colorfulness = 0.2
    else:
        colorfulness = 0.5

    return UserRequestAnalysis(
        original_prompt=prompt,
        keywords=_extract_request_keywords(lowered),
        platform=platform,
        aspect_ratio=_detect_aspect_ratio(lowered, platform),
        energy=detect_energy(prompt),
        professional=professional,
        colorfulness=colorfulness,
        has_data=bool(_DATA_RE.search(lowered)),
    )


def _keyword_matches(template_keyword: str, user_keyword: str) -> bool:
    """Exact match, containment of a word of 4+ letters, or a shared 4-letter stem."""
    if template_keyword == user_keyword:
        return True
    shorter, longer = sorted((template_keyword, user_keyword), key=len)
    if len(shorter) < MIN_PARTIAL_MATCH:
        return False
    # "demo" ~ "demos", "code" ~ "codebase"; "new" never matches "renewal".
    if shorter in longer:
        return True
    # Shared stem: "developers" ~ "develop", "launching" ~ "launch".
    return user_keyword.startswith(template_keyword[:MIN_PARTIAL_MATCH])


def matched_keywords(template: TemplateRecord, request: UserRequestAnalysis) -> list[str]:
    """Template keywords matched by at least one request keyword, in catalog order."""
    return [
        tk for tk in template.keywords
        if any(_keyword_matches(tk, uk) for uk in request.keywords)
    ]


def score_breakdown(template: TemplateRecord, request: UserRequestAnalysis) -> dict[str, float]:
    """Weighted contribution of each factor; the values sum to the score."""
    keyword_fraction = (
        len(matched_keywords(template, request)) / len(template.keywords) if template.keywords else 0.0
    )
    platform_hit = request.platform is not None and request.platform in template.platforms
    return {
        "keywords": WEIGHTS["keywords"] * keyword_fraction,
        "energy": WEIGHTS["energy"] * (1 - abs(template.energy / 10 - request.energy)),
        "professional": WEIGHTS["professional"] * (1 - abs(template.professional / 10 - request.professional)),
        "colorfulness": WEIGHTS["colorfulness"] * (1 - abs(template.colorfulness / 10 - request.colorfulness)),
        "platform": WEIGHTS["platform"] if platform_hit else 0.0,
    }


def score_template(template: TemplateRecord, request: UserRequestAnalysis) -> float:
    """Score *template* against *request* in ``[0, 1]``."""
    total = sum(score_breakdown(template, request).values())
    return round(max(0.0, min(1.0, total)), 4)


def _match_reason(template: TemplateRecord, breakdown: dict[str, float], keywords: list[str], score: float) -> str:
    ranked = sorted(
        ((factor, value) for factor, value in breakdown.items() if value > 0),
        key=lambda item: item[1],
        reverse=True,
    )[:2]
    if not ranked:
        return f"{template.name} ({score:.0%} match)"

    parts = []
    for factor, value in ranked:
        label = _FACTOR_LABELS[factor]
        if factor == "keywords":
            label = f"{label} ({', '.join(keywords[:3])})"
        parts.append(f"{label} +{value:.2f}")
    return "; ".join(parts)


def _match_warnings(template: TemplateRecord, request: UserRequestAnalysis) -> list[str]:
    warnings: list[str] = []
    if request.aspect_ratio and template.aspect_ratio != request.aspect_ratio:
        warnings.append(f"Template is {template.aspect_ratio}, you requested {request.aspect_ratio}")
    if request.platform and request.platform not in template.platforms:
        target = template.platforms[0] if template.platforms else "general use"
        warnings.append(f"Template optimized for {target}, not {request.platform}")
    if abs(template.energy / 10 - request.energy) > 0.4:
        wanted = "energetic" if request.energy > 0.5 else "calm"
        actual = "energetic" if template.energy > 5 else "calm"
        warnings.append(f"Template is {actual}, you want {wanted}")
    return warnings


def select_templates(
    catalog: Sequence[TemplateRecord],
    prompt: str,
    top_n: int = 3,
) -> list[TemplateMatch]:
    """Rank *catalog* against *prompt*.

    Args:
        catalog: Templates in catalog order (not mutated).
        prompt: Free-text description of the desired animation.
        top_n: Number of matches to return.

    Returns:
        Up to *top_n* matches, best first; equal scores keep catalog order.

    Raises:
        ValueError: If ``top_n < 1``.
    """
    if top_n < 1:
        raise ValueError(f"top_n must be >= 1, got {top_n}")

    request = analyze_user_request(prompt)
    matches: list[TemplateMatch] = []
    for template in catalog:
        breakdown = score_breakdown(template, request)
        score = round(max(0.0, min(1.0, sum(breakdown.values()))), 4)
        keywords = matched_keywords(template, request)
        matches.append(TemplateMatch(
            template=template,
            score=score,
            reason=_match_reason(template, breakdown, keywords, score),
            matched_keywords=keywords,
            warnings=_match_warnings(template, request),
        ))

    matches.sort(key=lambda m: m.score, reverse=True)
    return matches[:top_n]
