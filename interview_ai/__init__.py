from .answer_analyzer import AnswerAnalyzer
from .config import GatewayConfig, PipelineConfig, load_config
from .feedback import compose_feedback
from .gateway import InferenceGateway, RemoteResult
from .metrics import aggregate_metrics, generate_industry_comparison
from .pipeline import InterviewPipeline, InterviewSession
from .project_extractor import ProjectExtractor
from .question_generator import QuestionGenerator
from .schemas import (
    AnswerAnalysis,
    ComparisonData,
    InterviewMetrics,
    InterviewQuestion,
    InterviewReport,
    Project,
    SkillAssessment,
)
from .skill_assessment import assess_skill_level

__all__ = [
    'AnswerAnalyzer',
    'GatewayConfig',
    'PipelineConfig',
    'load_config',
    'compose_feedback',
    'InferenceGateway',
    'RemoteResult',
    'aggregate_metrics',
    'generate_industry_comparison',
    'InterviewPipeline',
    'InterviewSession',
    'ProjectExtractor',
    'QuestionGenerator',
    'AnswerAnalysis',
    'ComparisonData',
    'InterviewMetrics',
    'InterviewQuestion',
    'InterviewReport',
    'Project',
    'SkillAssessment',
    'assess_skill_level'
]
