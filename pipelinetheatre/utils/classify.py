"""
Theatre vs non-theatre classifier.

Venues are kept as sources, but only theatre representations are emitted.
Keyword heuristics, no ML: tune it through the keyword table.
"""

import json
import re
from dataclasses import dataclass, field
from pathlib import Path

from pipelinetheatre import config
from pipelinetheatre.utils.text import strip_diacritics

THEATRE = "theatre"
NON_THEATRE = "non-theatre"
UNKNOWN = "unknown"

# Accented and plain spellings are separate entries: each one scores.
POSITIVE_KEYWORDS = [
    "theatre", "théâtre",
    "piece", "pièce",
    "representation", "représentation",
    "mise en scene", "mise en scène",
    "spectacle",
    "comedie", "comédie",
    "drame", "tragedie", "tragédie",
    "seul en scene", "seul en scène",
]

NEGATIVE_KEYWORDS = [
    # music
    "concert", "live", "dj", "set", "club", "showcase", "release party", "album release", "jam",
    "jazz", "rock", "pop", "hip hop", "hip-hop", "electro",
    # visual arts
    "expo", "exposition", "vernissage",
    # cinema
    "projection", "cinema", "cinema", "film",
    # talks and workshops
    "conference", "conférence", "rencontre", "masterclass", "workshop", "atelier",
    # dance
    "dance", "danse",
]

SOFT_NEGATIVE_KEYWORDS = [
    "festival",
]

# Matched as written against the accent-stripped text
CREDIT_PHRASES = [
    "mise en scene", "mise en scène", "avec", "interpretation", "interprétation",
    "texte de", "d' apres", "d’après",
]

BILINGUAL_KEYWORDS_PATH = Path(__file__).with_name("keywords_bilingual.json")


def _norm(text):
    return strip_diacritics(text).lower()


@dataclass
class TheatreKeywords:
    """Keyword table used by classify_theatre. Keywords are matched without accents or case."""
    positive: list = field(default_factory=lambda: list(POSITIVE_KEYWORDS))
    negative: list = field(default_factory=lambda: list(NEGATIVE_KEYWORDS))
    soft_negative: list = field(default_factory=lambda: list(SOFT_NEGATIVE_KEYWORDS))
    credits: list = field(default_factory=lambda: list(CREDIT_PHRASES))

    def __post_init__(self):
        self._credits_re = (
            re.compile(r"\b(" + "|".join(re.escape(c) for c in self.credits) + r")\b")
            if self.credits else None
        )

    def has_credits(self, text):
        return bool(self._credits_re and self._credits_re.search(text))


@dataclass
class Classification:
    decision: str
    score: int
    confidence: float
    reasons: list = field(default_factory=list)


DEFAULT_KEYWORDS = TheatreKeywords()


def load_keywords(path=None):
    """
    Build a TheatreKeywords table from a JSON file.

    "positive", "negative", "soft_negative" and "credits" replace the
    built-in lists; "add_positive", "add_negative", "add_soft_negative" and
    "add_credits" extend them. Missing keys keep the built-in lists.
    Without a path (and no THEATRE_KEYWORDS_PATH configured) the defaults
    are returned. BILINGUAL_KEYWORDS_PATH adds Dutch and English terms.
    """
    path = path or config.THEATRE_KEYWORDS_PATH
    if not path:
        return DEFAULT_KEYWORDS

    with open(Path(path), "r", encoding="utf-8") as f:
        data = json.load(f)

    def table(name, default):
        return list(data.get(name, default)) + list(data.get(f"add_{name}", []))

    return TheatreKeywords(
        positive=table("positive", POSITIVE_KEYWORDS),
        negative=table("negative", NEGATIVE_KEYWORDS),
        soft_negative=table("soft_negative", SOFT_NEGATIVE_KEYWORDS),
        credits=table("credits", CREDIT_PHRASES),
    )


def classify_theatre(record, keywords=None):
    """
    Score a representation from its title, description and URL.

    Positive keyword: +3 in title, +1 in description.
    Negative keyword: -4 in title, -2 in description, -1 in URL.
    Soft negative: -1 if in title or description.
    Theatre credits ("mise en scène", "avec", "texte de"...): +1 once.

    score >= 2 is theatre, score <= -2 is non-theatre, anything between is unknown.
    """
    keywords = keywords or DEFAULT_KEYWORDS
    title = _norm(record.get("titre"))
    desc = _norm(record.get("description"))
    url = _norm(record.get("url"))

    score = 0
    reasons = []

    for k in keywords.positive:
        nk = _norm(k)
        if nk in title:
            score += 3
            reasons.append(f"pos:title:{k}")
        if nk in desc:
            score += 1
            reasons.append(f"pos:desc:{k}")

    for k in keywords.negative:
        nk = _norm(k)
        if nk in title:
            score -= 4
            reasons.append(f"neg:title:{k}")
        if nk in desc:
            score -= 2
            reasons.append(f"neg:desc:{k}")
        if nk in url:
            score -= 1
            reasons.append(f"neg:url:{k}")

    for k in keywords.soft_negative:
        nk = _norm(k)
        if nk in title or nk in desc:
            score -= 1
            reasons.append(f"softneg:{k}")

    if keywords.has_credits(f"{title} {desc}"):
        score += 1
        reasons.append("pos:credits")

    if score >= 2:
        decision = THEATRE
    elif score <= -2:
        decision = NON_THEATRE
    else:
        decision = UNKNOWN

    confidence = max(0.0, min(1.0, (score + 6) / 12))

    return Classification(
        decision=decision,
        score=score,
        confidence=confidence,
        reasons=list(dict.fromkeys(reasons))[:12],
    )


def is_vetoed(record):
    """A connector that sets is_theatre=False has the last word."""
    return record.get("is_theatre") is False


def should_emit(record, strict=None, keywords=None):
    """
    Gate a representation on its classification.
    Returns (ok, classification). Theatre always passes; unknown passes only
    when strict is False. strict=None uses THEATRE_FILTER_STRICT.
    An explicit is_theatre=False is rejected before any scoring counts.
    """
    if strict is None:
        strict = config.THEATRE_FILTER_STRICT

    classification = classify_theatre(record, keywords)
    if is_vetoed(record):
        return False, classification
    if classification.decision == THEATRE:
        return True, classification
    if not strict and classification.decision == UNKNOWN:
        return True, classification
    return False, classification
