from typing import List, Optional, Sequence
import logging
import math

from .schemas import AnswerAnalysis, ComparisonData, InterviewMetrics, OverallRating

logger = logging.getLogger('metrics')

PAUSE_SECONDS = 30
PAUSE_MAX_KEYWORDS = 5

# category, offset from the user's score, industry average, top performers
COMPARISON_BENCHMARKS = [
    ('Technical Skills', 0, 65, 85),
    ('Communication', -5, 70, 88),
    ('Problem Solving', 3, 62, 82),
    ('System Design', -2, 68, 86),
]

def rating_for(technical_depth: float) -> OverallRating:
    if technical_depth > 85:
        return OverallRating.EXCELLENT
    if technical_depth > 70:
        return OverallRating.GOOD
    if technical_depth >= 50:
        return OverallRating.FAIR
    return OverallRating.POOR

def aggregate_metrics(analyses: Optional[Sequence[AnswerAnalysis]]) -> InterviewMetrics:
    """Fold per-answer analyses into interview-level metrics."""
    analyses = list(analyses or [])
    num_answers = max(1, len(analyses))

    total_duration = sum(a.response_time for a in analyses)
    total_words = sum(len(a.keywords) for a in analyses)
    total_confidence = sum(a.confidence for a in analyses)
    total_technical = sum(a.technical_accuracy for a in analyses)
    total_communication = sum(a.communication_clarity for a in analyses)
    pause_count = sum(
        1 for a in analyses
        if a.response_time > PAUSE_SECONDS and len(a.keywords) < PAUSE_MAX_KEYWORDS
    )

    minutes = total_duration / 60
    technical_depth = total_technical / num_answers

    metrics = InterviewMetrics(
        total_duration=total_duration,
        average_response_time=total_duration / num_answers,
        words_per_minute=total_words / minutes if minutes > 0 else 0,
        pause_count=pause_count,
        confidence_level=total_confidence / num_answers,
        technical_depth=technical_depth,
        communication_score=total_communication / num_answers,
        overall_rating=rating_for(technical_depth)
    )
    logger.info(f"Aggregated {len(analyses)} answers: {metrics.overall_rating.value}")
    return metrics

def average_score(analyses: Optional[Sequence[AnswerAnalysis]]) -> float:
    analyses = list(analyses or [])
    if not analyses:
        return 0.0
    return sum(a.score for a in analyses) / len(analyses)

def generate_industry_comparison(score: Optional[float]) -> List[ComparisonData]:
    """Place a score next to fixed industry averages for four categories."""
    if isinstance(score, (int, float)) and not isinstance(score, bool) and math.isfinite(score):
        base = max(0, min(100, round(score)))
    else:
        base = 60

    return [
        ComparisonData(
            user_score=max(0, min(100, base + offset)),
            industry_average=industry_average,
            top_performers=top_performers,
            category=category
        )
        for category, offset, industry_average, top_performers in COMPARISON_BENCHMARKS
    ]
