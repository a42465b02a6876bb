from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class QuestionCategory(str, Enum):
    TECHNICAL = "technical"
    ARCHITECTURE = "architecture"
    PROBLEM_SOLVING = "problem-solving"
    IMPROVEMENT = "improvement"
    BEHAVIORAL = "behavioral"
    PROJECT_BASED = "project-based"

    @classmethod
    def normalize(cls, value: Any) -> "QuestionCategory":
        """Map free-form category text from a model onto a known category."""
        if isinstance(value, cls):
            return value
        text = str(value or "").strip().lower().replace("_", "-").replace(" ", "-")
        for category in cls:
            if category.value == text:
                return category
        if text in ("problem", "problemsolving"):
            return cls.PROBLEM_SOLVING
        if text in ("design", "system-design"):
            return cls.ARCHITECTURE
        return cls.TECHNICAL

class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

class Complexity(str, Enum):
    BASIC = "basic"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"

class OverallRating(str, Enum):
    POOR = "Poor"
    FAIR = "Fair"
    GOOD = "Good"
    EXCELLENT = "Excellent"

class SkillLevel(str, Enum):
    JUNIOR = "Junior"
    MID_LEVEL = "Mid-Level"
    SENIOR = "Senior"
    LEAD = "Lead"

    @property
    def rank(self) -> int:
        return list(SkillLevel).index(self)

class Record(BaseModel):
    """Immutable value object serialized in camelCase for the persistence layer."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")

class Project(Record):
    title: str = Field(..., min_length=3, max_length=100)
    description: str = Field(..., min_length=10, max_length=500)
    technologies: List[str] = Field(default_factory=list)
    duration: Optional[str] = None
    role: Optional[str] = None
    achievements: List[str] = Field(default_factory=list)

    @field_validator("title", "description", mode="before")
    @classmethod
    def _strip(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    @field_validator("technologies", mode="before")
    @classmethod
    def _dedupe_technologies(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            value = [value]
        seen = []
        for tech in value:
            tech = str(tech).strip().lower()
            if tech and tech not in seen:
                seen.append(tech)
        return seen

    @field_validator("achievements", mode="before")
    @classmethod
    def _clean_achievements(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            value = [value]
        return [str(item).strip() for item in value if str(item).strip()]

class InterviewQuestion(Record):
    id: str
    project_title: str
    question_text: str = Field(..., min_length=1)
    category: QuestionCategory = QuestionCategory.TECHNICAL
    expected_points: List[str] = Field(default_factory=list)

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> QuestionCategory:
        return QuestionCategory.normalize(value)

    @field_validator("expected_points", mode="before")
    @classmethod
    def _coerce_points(cls, value: Any) -> List[str]:
        if not value:
            return []
        if isinstance(value, str):
            return [value]
        return [str(point) for point in value]

class AnswerAnalysis(Record):
    score: float = Field(..., ge=0, le=100)
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    technical_accuracy: float = Field(..., ge=0, le=100)
    communication_clarity: float = Field(..., ge=0, le=100)
    problem_solving_approach: float = Field(..., ge=0, le=100)
    sentiment: Sentiment = Sentiment.NEUTRAL
    confidence: float = Field(50, ge=0, le=100)
    keywords: List[str] = Field(default_factory=list, max_length=8)
    response_time: float = Field(0, ge=0)
    complexity: Complexity = Complexity.BASIC
    industry_relevance: float = Field(..., ge=0, le=100)
    code_quality: Optional[float] = Field(None, ge=0, le=100)

class InterviewMetrics(Record):
    total_duration: float = 0
    average_response_time: float = 0
    words_per_minute: float = 0
    pause_count: int = 0
    confidence_level: float = 0
    technical_depth: float = 0
    communication_score: float = 0
    overall_rating: OverallRating = OverallRating.FAIR

class SkillAssessment(Record):
    level: SkillLevel
    years_estimate: str
    strengths: List[str] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)

class ComparisonData(Record):
    user_score: float = Field(..., ge=0, le=100)
    industry_average: float
    top_performers: float
    category: str

class InterviewReport(Record):
    metrics: InterviewMetrics
    skill_assessment: SkillAssessment
    comparison: List[ComparisonData] = Field(default_factory=list)
    feedback: str
    average_score: float = 0
