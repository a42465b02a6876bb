from typing import Any, Dict, List, Optional, Sequence, Set
import logging
import re

from pydantic import ValidationError

from .config import PipelineConfig
from .gateway import InferenceGateway
from .parallel_processor import ParallelProcessor
from .prompt_handler import PromptHandler
from .schemas import InterviewQuestion, Project, QuestionCategory

logger = logging.getLogger('question_generator')

MAX_PROJECTS = 3
QUESTIONS_PER_PROJECT = 4
MIN_LINE_QUESTION_CHARS = 20

def slugify(text: str) -> str:
    slug = re.sub(r'[^a-z0-9]+', '-', (text or 'project').lower()).strip('-')
    return slug[:50] or 'project'

def fallback_questions() -> List[InterviewQuestion]:
    """General questions used when there are no projects to ask about."""
    return [
        InterviewQuestion(
            id='local-fallback-1',
            project_title='General',
            question_text='Tell me about a recent project you built. What problem did it solve?',
            category=QuestionCategory.TECHNICAL,
            expected_points=['Problem statement', 'Your role', 'Key technologies']
        ),
        InterviewQuestion(
            id='local-fallback-2',
            project_title='General',
            question_text='What technical challenge did you face in your projects and how did you solve it?',
            category=QuestionCategory.PROBLEM_SOLVING,
            expected_points=['Challenge', 'Approach', 'Result']
        ),
        InterviewQuestion(
            id='local-fallback-3',
            project_title='General',
            question_text='How do you evaluate trade-offs when designing an architecture?',
            category=QuestionCategory.ARCHITECTURE,
            expected_points=['Trade-offs', 'Scalability', 'Performance']
        ),
        InterviewQuestion(
            id='local-fallback-4',
            project_title='General',
            question_text='What would you improve in a past project if you rewrote it today?',
            category=QuestionCategory.BEHAVIORAL,
            expected_points=['Learnings', 'Refactor ideas', 'Impact']
        ),
    ]

def local_template_questions(project: Project) -> List[InterviewQuestion]:
    """Four fixed questions about one project."""
    slug = slugify(project.title)
    templates = [
        (f'Explain the core problem your project "{project.title}" solves.',
         QuestionCategory.TECHNICAL, ['Problem definition', 'Use case', 'Impact']),
        (f'Walk me through the architecture of "{project.title}".',
         QuestionCategory.ARCHITECTURE, ['Tech stack', 'Flow', 'Design decisions']),
        (f'What was the biggest challenge while building "{project.title}"?',
         QuestionCategory.PROBLEM_SOLVING, ['Obstacle', 'Your solution', 'Outcome']),
        (f'If you had more time, what would you improve in "{project.title}"?',
         QuestionCategory.IMPROVEMENT, ['Optimization ideas', 'Better tech choices', 'Performance']),
    ]
    return [
        InterviewQuestion(
            id=f"{slug}-local-{i}",
            project_title=project.title,
            question_text=text,
            category=category,
            expected_points=points
        )
        for i, (text, category, points) in enumerate(templates, 1)
    ]

def dedupe_questions(questions: Sequence[InterviewQuestion]) -> List[InterviewQuestion]:
    """Drop repeated question texts (case-insensitive, trimmed); first occurrence wins."""
    seen = set()
    unique = []
    for question in questions:
        key = question.question_text.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        unique.append(question)
    return unique

def ensure_unique_ids(questions: Sequence[InterviewQuestion]) -> List[InterviewQuestion]:
    """Suffix repeated ids with -2, -3, ... skipping any id already emitted."""
    emitted: Set[str] = set()
    next_suffix: Dict[str, int] = {}
    result = []
    for question in questions:
        candidate = question.id
        if candidate in emitted:
            suffix = next_suffix.get(question.id, 2)
            while f"{question.id}-{suffix}" in emitted:
                suffix += 1
            candidate = f"{question.id}-{suffix}"
            next_suffix[question.id] = suffix + 1
            question = question.model_copy(update={'id': candidate})
        emitted.add(candidate)
        result.append(question)
    return result

class QuestionGenerator:
    def __init__(self, gateway: Optional[InferenceGateway] = None, config: Optional[PipelineConfig] = None):
        self.gateway = gateway
        self.config = config or PipelineConfig()

    def _questions_from_items(self, items: List[Any], project: Project) -> List[InterviewQuestion]:
        slug = slugify(project.title)
        questions = []
        for idx, item in enumerate(items):
            if isinstance(item, str):
                item = {'questionText': item}
            if not isinstance(item, dict):
                continue
            text = item.get('questionText') or item.get('question') or item.get('prompt')
            points = item.get('expectedPoints') or item.get('points') or []
            try:
                questions.append(InterviewQuestion(
                    id=f"{slug}-{idx + 1}",
                    project_title=project.title,
                    question_text=str(text or '').strip(),
                    category=item.get('category') or item.get('type') or 'technical',
                    expected_points=points if isinstance(points, list) else []
                ))
            except ValidationError:
                logger.debug(f"Skipping malformed question item {idx} for {project.title!r}")
            if len(questions) >= QUESTIONS_PER_PROJECT:
                break
        return questions

    def _questions_from_lines(self, text: str, project: Project) -> List[InterviewQuestion]:
        slug = slugify(project.title)
        questions = []
        lines = [line.strip() for line in text.split('\n') if line.strip()]
        for i, line in enumerate(lines):
            if len(questions) >= QUESTIONS_PER_PROJECT:
                break
            line = re.sub(r'^[0-9.\-)\s]+', '', line).strip()
            if len(line) > MIN_LINE_QUESTION_CHARS:
                questions.append(InterviewQuestion(
                    id=f"{slug}-hf-{i}",
                    project_title=project.title,
                    question_text=line,
                    category=QuestionCategory.TECHNICAL,
                    expected_points=[]
                ))
        return questions

    def generate_remote(self, project: Project) -> List[InterviewQuestion]:
        """Ask the text model for questions; an empty list means fall back."""
        if self.gateway is None or not self.gateway.text_model_available:
            return []

        result = self.gateway.call_text_model(
            PromptHandler.build_question_prompt(project),
            max_tokens=400,
            temperature=0.25
        )
        if not result.ok:
            logger.warning(f"Question model failed for {project.title!r}: {result.reason}")
            return []

        text = result.value or ''
        items = PromptHandler.extract_json_array(text)
        if items:
            questions = self._questions_from_items(items, project)
            if questions:
                return questions
        logger.info(f"No JSON questions for {project.title!r}, splitting lines instead")
        return self._questions_from_lines(text, project)

    def questions_for_project(self, project: Project) -> List[InterviewQuestion]:
        questions = self.generate_remote(project)
        if not questions:
            logger.info(f"Using local question templates for {project.title!r}")
            questions = local_template_questions(project)
        return questions

    def generate_questions(self, projects: Sequence[Project]) -> List[InterviewQuestion]:
        if not projects:
            return fallback_questions()

        selected = list(projects)[:MAX_PROJECTS]
        if self.config.parallel_question_generation and len(selected) > 1:
            processor = ParallelProcessor(max_workers=self.config.max_workers)
            per_project, _ = processor.map_ordered(selected, self.questions_for_project)
        else:
            per_project = [self.questions_for_project(project) for project in selected]

        questions = [question for batch in per_project for question in batch]
        return ensure_unique_ids(dedupe_questions(questions))

    def generate_questions_guaranteed(self, projects: Sequence[Project]) -> List[InterviewQuestion]:
        """Never raises and never returns an empty list."""
        try:
            questions = self.generate_questions(projects)
            if questions:
                return questions
        except Exception as e:
            logger.warning(f"Question generation failed, using fallback questions: {str(e)}")
        return fallback_questions()
