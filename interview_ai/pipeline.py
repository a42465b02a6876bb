from typing import Dict, List, Optional, Sequence, Tuple
import logging

from .answer_analyzer import AnswerAnalyzer
from .config import PipelineConfig, load_config
from .feedback import compose_feedback
from .gateway import InferenceGateway
from .metrics import aggregate_metrics, average_score, generate_industry_comparison
from .project_extractor import ProjectExtractor
from .question_generator import QuestionGenerator
from .schemas import AnswerAnalysis, InterviewQuestion, InterviewReport, Project
from .skill_assessment import assess_skill_level

logger = logging.getLogger('interview_pipeline')

class InterviewPipeline:
    """Wires extraction, question generation, answer scoring and reporting together."""

    def __init__(self, config: Optional[PipelineConfig] = None, gateway: Optional[InferenceGateway] = None):
        self.config = config or load_config()
        self.gateway = gateway or InferenceGateway(self.config.gateway)
        self.extractor = ProjectExtractor(self.gateway, self.config)
        self.question_generator = QuestionGenerator(self.gateway, self.config)
        self.analyzer = AnswerAnalyzer(self.gateway, self.config)

    def prepare(self, resume_text: str) -> Tuple[List[Project], List[InterviewQuestion]]:
        """Resume text to projects and the questions to ask about them."""
        projects = self.extractor.extract_projects(resume_text)
        questions = self.question_generator.generate_questions_guaranteed(projects)
        logger.info(f"Prepared {len(questions)} questions from {len(projects)} projects")
        return projects, questions

    def analyze_answer(self, question: InterviewQuestion, answer_text: str,
                       project: Optional[Project] = None, response_time: Optional[float] = None) -> AnswerAnalysis:
        return self.analyzer.analyze_answer(question, answer_text, project, response_time)

    def complete(self, analyses: Sequence[AnswerAnalysis], projects: Sequence[Project]) -> InterviewReport:
        """Metrics, skill assessment, comparison and feedback for a finished interview."""
        metrics = aggregate_metrics(analyses)
        skill = assess_skill_level(projects)
        score = average_score(analyses)
        comparison = generate_industry_comparison(score)
        feedback = compose_feedback(metrics, comparison, skill, projects)
        return InterviewReport(
            metrics=metrics,
            skill_assessment=skill,
            comparison=comparison,
            feedback=feedback,
            average_score=score
        )

class InterviewSession:
    """
    Collects answers for one interview as the conversation delivers them.

    Answers may arrive in any order; a re-submitted answer replaces the earlier
    analysis for that question. After cancel() further answers are ignored.
    """

    def __init__(self, pipeline: InterviewPipeline, questions: Sequence[InterviewQuestion],
                 projects: Sequence[Project] = ()):
        self.pipeline = pipeline
        self.questions = {question.id: question for question in questions}
        self.projects = list(projects)
        self.analyses: Dict[str, AnswerAnalysis] = {}
        self.cancelled = False

    def _project_for(self, question: InterviewQuestion) -> Optional[Project]:
        for project in self.projects:
            if project.title == question.project_title:
                return project
        return None

    def submit_answer(self, question_id: str, answer_text: str,
                      response_time: Optional[float] = None) -> Optional[AnswerAnalysis]:
        if self.cancelled:
            logger.info(f"Session cancelled, ignoring answer for {question_id}")
            return None

        question = self.questions.get(question_id)
        if question is None:
            raise KeyError(f"Unknown question id: {question_id}")

        analysis = self.pipeline.analyze_answer(question, answer_text, self._project_for(question), response_time)
        if self.cancelled:
            # cancelled while the analysis was in flight
            return None
        self.analyses[question_id] = analysis
        return analysis

    def cancel(self) -> None:
        self.cancelled = True

    def finish(self) -> InterviewReport:
        return self.pipeline.complete(list(self.analyses.values()), self.projects)
