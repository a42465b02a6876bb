"""
Answer scoring policy.

Signals are computed once per answer; every rule in SCORING_RULES is checked
against them. A fired rule contributes its feedback line and its score delta.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

import regex as re

from .schemas import Complexity, QuestionCategory

MIN_SCORE = 20
MAX_SCORE = 95
WORD_SCORE_CAP = 50
MAX_KEYWORDS = 8

EXAMPLE_PATTERN = re.compile(r'\b(?:for example|example|instance|case|such as|like when)', re.IGNORECASE)
TECHNICAL_TERMS_PATTERN = re.compile(
    r'\b(?:algorithms?|architecture|implementation|apis?|databases?|performance|latency|scalability|'
    r'deploy\w*|containers?|docker|kubernetes|threads?|async|lambda|queues?|cache|caching|redis|'
    r'mongodb|postgres|sql|rest|graphql)\b',
    re.IGNORECASE
)
METRICS_PATTERN = re.compile(
    r'\b\d+(?:\.\d+)?\s*%|\b\d+(?:\.\d+)?\s*x\b|\b\d+\s*ms\b|\b\d+\s*(?:sec|secs|seconds)\b|'
    r'\bimprov(?:ed|ement)|\breduc(?:ed|tion)\b',
    re.IGNORECASE
)

STOPWORDS = frozenset([
    'the', 'a', 'an', 'is', 'are', 'was', 'were', 'and', 'but', 'or', 'to', 'in', 'of', 'i', 'my',
    'me', 'we', 'our', 'on', 'at', 'with', 'for', 'from', 'by', 'as', 'it', 'its', 'this', 'that',
    'they', 'them', 'their',
])

@dataclass(frozen=True)
class AnswerSignals:
    word_count: int
    has_examples: bool
    has_technical_terms: bool
    has_metrics: bool
    category: QuestionCategory = QuestionCategory.TECHNICAL

    @classmethod
    def from_text(cls, text: str, category: Optional[QuestionCategory] = None) -> "AnswerSignals":
        clean = (text or '').strip()
        return cls(
            word_count=len(clean.split()) if clean else 0,
            has_examples=bool(EXAMPLE_PATTERN.search(clean)),
            has_technical_terms=bool(TECHNICAL_TERMS_PATTERN.search(clean)),
            has_metrics=bool(METRICS_PATTERN.search(clean)),
            category=category or QuestionCategory.TECHNICAL
        )

@dataclass(frozen=True)
class ScoringRule:
    kind: str  # 'strength', 'weakness' or 'suggestion'
    text: str
    condition: Callable[[AnswerSignals], bool]
    score_delta: int = 0

SCORING_RULES: List[ScoringRule] = [
    ScoringRule('strength', 'Comprehensive detail and elaboration',
                lambda s: s.word_count > 80, 5),
    ScoringRule('strength', 'Used relevant technical vocabulary',
                lambda s: s.has_technical_terms, 15),
    ScoringRule('strength', 'Provided concrete examples',
                lambda s: s.has_examples, 10),
    ScoringRule('strength', 'Included measurable outcomes',
                lambda s: s.has_metrics, 10),
    ScoringRule('weakness', 'Answer is brief; expand with specifics',
                lambda s: s.word_count < 40),
    ScoringRule('weakness', 'Add more technical depth and terminology',
                lambda s: s.category is QuestionCategory.TECHNICAL and not s.has_technical_terms),
    ScoringRule('weakness', 'Include specific examples or scenarios',
                lambda s: not s.has_examples),
    ScoringRule('suggestion', 'Link answers to measurable outcomes or architecture diagrams when possible.',
                lambda s: True),
    ScoringRule('suggestion', 'Quantify the impact (e.g., "reduced latency by 30%")',
                lambda s: s.category is QuestionCategory.PROBLEM_SOLVING and not s.has_metrics),
]

def evaluate_rules(signals: AnswerSignals, rules: Optional[List[ScoringRule]] = None) -> Dict[str, object]:
    """Fire every matching rule; returns feedback lists and the clamped score."""
    rules = SCORING_RULES if rules is None else rules
    feedback: Dict[str, List[str]] = {'strength': [], 'weakness': [], 'suggestion': []}
    score = min(WORD_SCORE_CAP, signals.word_count)

    for rule in rules:
        if rule.condition(signals):
            feedback[rule.kind].append(rule.text)
            score += rule.score_delta

    return {
        'score': max(MIN_SCORE, min(MAX_SCORE, score)),
        'strengths': feedback['strength'],
        'weaknesses': feedback['weakness'],
        'suggestions': feedback['suggestion'],
    }

def dimension_scores(signals: AnswerSignals) -> Dict[str, float]:
    technical = 75 if signals.has_technical_terms else 50
    return {
        'technical_accuracy': technical,
        'communication_clarity': 75 if signals.word_count > 30 else 45,
        'problem_solving_approach': 80 if (signals.has_examples or signals.has_metrics) else 60,
        'industry_relevance': technical,
        'code_quality': 60 if signals.has_technical_terms else 45,
    }

def complexity_for(word_count: int) -> Complexity:
    if word_count > 120:
        return Complexity.ADVANCED
    if word_count > 50:
        return Complexity.INTERMEDIATE
    return Complexity.BASIC

def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> List[str]:
    """Most frequent non-stopword tokens; ties keep first-seen order."""
    if not text:
        return []
    tokens = [
        token for token in re.split(r'\W+', text.lower())
        if len(token) > 2 and token not in STOPWORDS
    ]
    # Counter keeps insertion order for equal counts
    return [word for word, _ in Counter(tokens).most_common(limit)]
