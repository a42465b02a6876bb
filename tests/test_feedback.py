import math

from interview_ai.feedback import compose_feedback
from interview_ai.metrics import generate_industry_comparison
from interview_ai.schemas import InterviewMetrics, OverallRating, SkillAssessment, SkillLevel

SECTIONS = [
    "## Overall Performance",
    "## Technical Assessment",
    "## Key Strengths",
    "## Recommendations for Growth",
    "## Industry Comparison",
]

class TestComposeFeedback:
    def test_full_report(self, sample_projects):
        metrics = InterviewMetrics(
            total_duration=600,
            confidence_level=72.4,
            technical_depth=78.25,
            communication_score=66.0,
            overall_rating=OverallRating.GOOD
        )
        skill = SkillAssessment(
            level=SkillLevel.MID_LEVEL,
            years_estimate="2-4 years",
            strengths=["Strong in react, node"],
            recommendations=["Practice system design"]
        )
        feedback = compose_feedback(metrics, generate_industry_comparison(72), skill, sample_projects)

        assert feedback.startswith("# Interview Summary Report: Good Performance")
        for section in SECTIONS:
            assert section in feedback
        assert "10-minute session" in feedback
        assert "confidence level of 72%" in feedback
        assert "**Mid-Level** (2-4 years experience)" in feedback
        assert "- Strong in react, node" in feedback
        assert "- Practice system design" in feedback
        assert "Technical Skills: 72/100 (Industry average: 65)" in feedback
        assert "TaskFlow, Price Watcher, Fleet Monitor, Recipe Box" in feedback

    def test_camel_case_dicts(self):
        feedback = compose_feedback(
            {"overallRating": "Excellent", "technicalDepth": 91.3, "totalDuration": 300},
            [{"category": "Communication", "userScore": 88, "industryAverage": 70}],
            {"level": "Senior", "yearsEstimate": "4-7 years"},
            [{"title": "Chat Relay"}]
        )
        assert "Excellent Performance" in feedback
        assert "91.3%" in feedback
        assert "5-minute session" in feedback
        assert "Communication: 88/100 (Industry average: 70)" in feedback
        assert "Chat Relay" in feedback

    def test_missing_inputs(self):
        feedback = compose_feedback(None)

        assert "Fair Performance" in feedback
        for section in SECTIONS:
            assert section in feedback
        assert "- Demonstrated foundational skills" in feedback
        assert "- No comparison data available" in feedback
        assert "various development projects" in feedback

    def test_non_finite_numbers(self):
        feedback = compose_feedback({"technicalDepth": math.nan, "totalDuration": math.inf})
        assert "technical depth scored 0.0%" in feedback
        assert "0-minute session" in feedback
        assert "nan" not in feedback.lower()

    def test_garbage_lists(self):
        feedback = compose_feedback({}, "not a list", {"strengths": "also not a list"}, 42)
        assert "- Demonstrated foundational skills" in feedback
