from typing import Any, Dict, List, Optional, Sequence
import logging
import math

from pydantic import BaseModel

logger = logging.getLogger('feedback')

def _as_dict(value: Any) -> Dict[str, Any]:
    """Model or mapping to a plain dict; anything else becomes empty."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, dict):
        return value
    return {}

def _field(data: Dict[str, Any], snake: str, camel: str, default: Any = None) -> Any:
    value = data.get(snake)
    if value is None:
        value = data.get(camel)
    return default if value is None else value

def _number(value: Any) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0

def _list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []

def _bullets(items: Sequence[Any], empty: str) -> str:
    lines = [f"- {item}" for item in items if str(item).strip()]
    return '\n'.join(lines) if lines else f"- {empty}"

def compose_feedback(metrics: Any, comparison_data: Optional[Sequence[Any]] = None,
                     skill_assessment: Any = None, projects: Optional[Sequence[Any]] = None) -> str:
    """
    Render the interview report as Markdown.

    Every input may be a model, a dict (snake_case or camelCase keys), partial
    or None; missing numbers render as 0 and missing lists as a default line.
    """
    metrics = _as_dict(metrics)
    total_duration = _number(_field(metrics, 'total_duration', 'totalDuration'))
    confidence_level = _number(_field(metrics, 'confidence_level', 'confidenceLevel'))
    technical_depth = _number(_field(metrics, 'technical_depth', 'technicalDepth'))
    communication_score = _number(_field(metrics, 'communication_score', 'communicationScore'))
    overall_rating = _field(metrics, 'overall_rating', 'overallRating', 'Fair')

    skill = _as_dict(skill_assessment)
    level = _field(skill, 'level', 'level', 'Junior')
    years_estimate = _field(skill, 'years_estimate', 'yearsEstimate', '0-2 years')
    strengths = _list(_field(skill, 'strengths', 'strengths'))
    recommendations = _list(_field(skill, 'recommendations', 'recommendations'))

    comparison_lines = []
    for row in _list(comparison_data):
        row = _as_dict(row)
        category = _field(row, 'category', 'category', 'Overall')
        user_score = _number(_field(row, 'user_score', 'userScore'))
        industry_average = _number(_field(row, 'industry_average', 'industryAverage'))
        comparison_lines.append(f"{category}: {user_score:.0f}/100 (Industry average: {industry_average:.0f})")

    titles = []
    for project in _list(projects):
        title = _field(_as_dict(project), 'title', 'title')
        if title:
            titles.append(str(title))
    projects_summary = ', '.join(titles) or 'various development projects'

    logger.info(f"Composing feedback report ({overall_rating})")

    return f"""# Interview Summary Report: {overall_rating} Performance

## Overall Performance
Your interview performance was rated as {overall_rating}. During the {round(total_duration / 60)}-minute session, you maintained a confidence level of {round(confidence_level)}% and demonstrated a skill level of **{level}** ({years_estimate} experience).

## Technical Assessment
Your technical depth scored {technical_depth:.1f}% with a communication score of {communication_score:.1f}%. You discussed projects including: {projects_summary}.

## Key Strengths
{_bullets(strengths, 'Demonstrated foundational skills')}

## Recommendations for Growth
{_bullets(recommendations, 'Keep building projects and practice problem solving')}

## Industry Comparison
{_bullets(comparison_lines, 'No comparison data available')}

---

Keep building on your strengths and focus on measurable impact in your answers (metrics, performance, cost/time improvements)."""
