"""
Sentiment Classifier.

Heuristic keyword scoring of suggestion text into positive, neutral or
negative. The vocabularies below are fixed: changing a single entry changes
the label of existing submissions.
"""

import re
from dataclasses import dataclass
from typing import Optional

from src.models.enums import Sentiment

POSITIVE_WORDS = [
    "improve", "better", "efficient", "increase", "enhance", "optimize", "boost", "upgrade",
    "streamline", "accelerate", "maximize", "minimize", "reduce", "save", "benefit", "advantage",
    "success", "excellent", "great", "outstanding", "effective", "productive", "innovative",
    "solution", "solve", "resolve", "fix", "repair", "help", "support", "enable", "facilitate",
    "empower", "transform", "revolutionize", "advance", "progress", "growth", "profit", "gain",
    "quality", "excellence", "superior", "optimal", "best", "top", "leading", "cutting-edge",
]

NEGATIVE_WORDS = [
    "problem", "issue", "issues", "fail", "error", "errors", "broken", "slow", "difficult",
    "challenge", "barrier", "obstacle", "bottleneck", "inefficient", "waste", "loss",
    "decline", "decrease", "deteriorate", "worse", "worst", "poor", "bad", "terrible",
    "awful", "horrible", "unacceptable", "bug", "bugs", "critical", "urgent", "emergency",
    "crisis", "risk", "danger", "threat", "concern", "worry", "frustration", "complaint",
    "dissatisfaction", "disappointment", "failure", "breakdown", "malfunction", "defect",
    "flaw", "weakness", "vulnerability", "inadequate", "insufficient", "lack", "shortage",
    "deficit", "gap", "delay", "wait", "poorly",
]

NEGATION_PHRASES = [
    "not good", "not great", "not working", "not work", "not acceptable", "no improvement",
    "doesn't work", "dont work", "don't work", "isn't working", "isnt working",
    "cannot", "can't", "cant", "never works", "fails to",
]

STRONG_NEGATIVES = [
    "worst", "terrible", "awful", "horrible", "crisis", "emergency", "critical", "unacceptable",
]

SOLUTION_LENGTH_BONUS_THRESHOLD = 50
BENEFIT_LENGTH_BONUS_THRESHOLD = 30


def _stem_pattern(stem: str) -> "re.Pattern":
    # Stem at a word start, followed by any word characters ("improve" -> "improvement")
    return re.compile(rf"\b{re.escape(stem)}\w*\b", re.IGNORECASE | re.ASCII)


def _phrase_pattern(phrase: str) -> "re.Pattern":
    return re.compile(rf"\b{re.escape(phrase)}\b", re.IGNORECASE | re.ASCII)


def _utf16_length(text: str) -> int:
    # Length thresholds count UTF-16 code units; astral characters count twice
    return len(text.encode("utf-16-le", "surrogatepass")) // 2


_POSITIVE_PATTERNS = [_stem_pattern(word) for word in POSITIVE_WORDS]
_NEGATIVE_PATTERNS = [_stem_pattern(word) for word in NEGATIVE_WORDS]
_NEGATION_PATTERNS = [_phrase_pattern(phrase) for phrase in NEGATION_PHRASES]
_STRONG_NEGATIVE_PATTERNS = [_phrase_pattern(word) for word in STRONG_NEGATIVES]


@dataclass(frozen=True)
class SentimentScore:
    """Intermediate scores of one classification."""
    positive: int
    negative: int
    strong_negative: bool
    label: Sentiment

    @property
    def difference(self) -> int:
        return self.positive - self.negative


def score(problem: str, solution: str, benefit: Optional[str] = None) -> SentimentScore:
    """
    Score suggestion text and pick its sentiment label.

    Args:
        problem: Problem statement
        solution: Proposed solution
        benefit: Optional expected benefit

    Returns:
        SentimentScore with both raw scores and the resulting label
    """
    problem = problem or ""
    solution = solution or ""
    text = f"{problem} {solution} {benefit or ''}".lower()

    positive = sum(len(pattern.findall(text)) for pattern in _POSITIVE_PATTERNS)
    negative = sum(len(pattern.findall(text)) for pattern in _NEGATIVE_PATTERNS)
    negative += sum(len(pattern.findall(text)) for pattern in _NEGATION_PATTERNS)

    # Length bonus: detailed proposals lean positive
    if _utf16_length(solution) > SOLUTION_LENGTH_BONUS_THRESHOLD:
        positive += 1
    if benefit and _utf16_length(benefit) > BENEFIT_LENGTH_BONUS_THRESHOLD:
        positive += 1

    strong_negative = any(pattern.search(text) for pattern in _STRONG_NEGATIVE_PATTERNS)
    difference = positive - negative

    if strong_negative and negative >= 1 and difference < 2:
        label = Sentiment.NEGATIVE
    elif difference >= 2:
        label = Sentiment.POSITIVE
    elif difference <= -1:
        label = Sentiment.NEGATIVE
    else:
        label = Sentiment.NEUTRAL

    return SentimentScore(
        positive=positive,
        negative=negative,
        strong_negative=strong_negative,
        label=label
    )


def classify(problem: str, solution: str, benefit: Optional[str] = None) -> Sentiment:
    """Classify suggestion text as positive, neutral or negative."""
    return score(problem, solution, benefit).label
