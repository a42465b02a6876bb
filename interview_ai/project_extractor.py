from typing import Any, Dict, List, Optional, Sequence, Tuple
import logging

import regex as re
from pydantic import ValidationError

from .config import PipelineConfig
from .gateway import InferenceGateway
from .prompt_handler import PromptHandler
from .schemas import Project

logger = logging.getLogger('project_extractor')

MAX_PROJECTS = 5
REMOTE_LIMIT = 5
REGEX_LIMIT = 4
EMERGENCY_LIMIT = 3

MAX_TITLE_CHARS = 100
MAX_DESCRIPTION_CHARS = 500
EMERGENCY_TITLE_CHARS = 60
EMERGENCY_DESCRIPTION_CHARS = 400
MIN_BULLET_CHARS = 50
MIN_PARAGRAPH_CHARS = 80
MAX_ACHIEVEMENTS = 3

# Canonical technology name -> pattern (matched case-insensitively on word boundaries)
TECH_VOCABULARY: Dict[str, str] = {
    'react': r'react(?:\.?js)?',
    'node': r'node(?:\.?js)?',
    'python': r'python',
    'java': r'java',
    'javascript': r'javascript',
    'typescript': r'typescript',
    'mongodb': r'mongo(?:db)?',
    'sql': r'sql',
    'postgres': r'postgres(?:ql)?',
    'mysql': r'mysql',
    'docker': r'docker',
    'kubernetes': r'kubernetes|k8s',
    'aws': r'aws',
    'azure': r'azure',
    'gcp': r'gcp',
    'express': r'express(?:\.?js)?',
    'next': r'next\.?js',
    'vue': r'vue(?:\.?js)?',
    'angular': r'angular',
    'django': r'django',
    'flask': r'flask',
    'spring': r'spring(?: boot)?',
    'fastapi': r'fastapi',
    'graphql': r'graphql',
    'rest': r'rest(?:ful)?(?= api)|restful',
    'api': r'apis?',
    'html': r'html5?',
    'css': r'css3?',
    'tailwind': r'tailwind(?:css)?',
    'bootstrap': r'bootstrap',
    'git': r'git',
    'github': r'github',
    'jenkins': r'jenkins',
    'ml': r'ml',
    'ai': r'ai',
    'tensorflow': r'tensorflow',
    'pytorch': r'pytorch',
    'xgboost': r'xgboost',
    'pandas': r'pandas',
    'numpy': r'numpy',
    'redis': r'redis',
}

_TECH_PATTERNS: List[Tuple[str, Any]] = [
    (name, re.compile(rf'\b(?:{pattern})\b', re.IGNORECASE))
    for name, pattern in TECH_VOCABULARY.items()
]

EMERGENCY_TECH_PATTERN = re.compile(
    r'\b(react|node|python|java|javascript|typescript|mongodb|sql|docker|api|ml|ai|express|'
    r'database|backend|frontend|full.?stack)\b',
    re.IGNORECASE
)

ACTION_VERB_PATTERN = re.compile(
    r'\b(built|developed|created|implemented|designed|optimized|improved|reduced|increased|deployed|architected)\b',
    re.IGNORECASE
)

# Education and skills-section boilerplate that must never become a project
INVALID_PATTERNS = [
    re.compile(
        r'\b(?:c?gpa|percentage|grade|university|college|school|degree|b\.?tech|m\.?tech|ph\.?d)\b|\bb\.e\.',
        re.IGNORECASE
    ),
    re.compile(
        r'\b(?:skills?|languages?|tools?|frameworks?|certifications?|awards?|hackathons?|competitions?)\b',
        re.IGNORECASE
    ),
]

PROJECT_HEADING = re.compile(
    r'^[ \t]*(?:technical |personal |academic |key |selected |notable )?projects?[ \t]*:?[ \t]*$',
    re.IGNORECASE | re.MULTILINE
)
SECTION_HEADING = re.compile(
    r'^[ \t]*(?:technical |work |professional )?(?:education|skills|experience|certifications?)[ \t]*:?[ \t]*$',
    re.IGNORECASE | re.MULTILINE
)
BULLET_SPLIT = re.compile(r'\n\s*[•\-*]\s*|\n\s*\d+\.\s*')
TITLE_BODY_PATTERNS = [
    re.compile(r'(?:^|\n)([A-Z][^•\n]{10,80}?)(?:\n|$)((?:[^•\n]*(?:\n|$)){1,5})'),
    re.compile(r'(?:Title|Project):\s*([^\n]+)(?:\n|$)((?:[^•\n]*(?:\n|$)){1,5})', re.IGNORECASE),
]
TITLE_PREFIX = re.compile(r'^[\s•\-*]*(?:\d+[.)]\s*)?(?:(?:title|project)\s*:\s*)?', re.IGNORECASE)

def clean_resume_text(text: str) -> str:
    """Normalize line endings and collapse runs of blank lines."""
    text = text.replace('\r\n', '\n').replace('\r', '\n')
    text = re.sub(r'\n{3,}', '\n\n', text)
    return text.strip()

def clean_title(line: str) -> str:
    return TITLE_PREFIX.sub('', line).strip()

def match_technologies(text: str) -> List[str]:
    """Vocabulary technologies mentioned in the text, in order of first mention."""
    found = []
    for name, pattern in _TECH_PATTERNS:
        match = pattern.search(text)
        if match:
            found.append((match.start(), name))
    return [name for _, name in sorted(found)]

def extract_achievements(text: str) -> List[str]:
    """Up to three sentences that describe something the candidate did."""
    achievements = []
    for sentence in re.split(r'[.;!?]', text):
        sentence = sentence.strip().lstrip('•-* ').strip()
        if len(sentence) > 15 and ACTION_VERB_PATTERN.search(sentence):
            achievements.append(sentence)
        if len(achievements) >= MAX_ACHIEVEMENTS:
            break
    return achievements

class ProjectValidator:
    """Applies the length invariants and the boilerplate patterns to a candidate."""

    @staticmethod
    def is_invalid_text(text: str) -> bool:
        return any(pattern.search(text) for pattern in INVALID_PATTERNS)

    def build(self, title: str, description: str, technologies: Sequence[str] = (),
              achievements: Sequence[str] = (), duration: Optional[str] = None,
              role: Optional[str] = None) -> Optional[Project]:
        """Return a Project, or None when the candidate must be dropped."""
        title = (title or '').strip()[:MAX_TITLE_CHARS].strip()
        description = (description or '').strip()[:MAX_DESCRIPTION_CHARS].strip()

        if self.is_invalid_text(title) or self.is_invalid_text(description):
            logger.debug(f"Rejected boilerplate candidate: {title[:40]!r}")
            return None

        try:
            return Project(
                title=title,
                description=description,
                technologies=list(technologies),
                achievements=list(achievements),
                duration=duration,
                role=role
            )
        except ValidationError as e:
            logger.debug(f"Rejected candidate {title[:40]!r}: {e.error_count()} validation errors")
            return None

class ExtractionStrategy:
    """One tier of the extraction chain. Returns None when it has nothing to offer."""
    name = "base"

    def __init__(self, validator: Optional[ProjectValidator] = None):
        self.validator = validator or ProjectValidator()

    def extract(self, text: str) -> Optional[List[Project]]:
        raise NotImplementedError

class RemoteExtraction(ExtractionStrategy):
    name = "remote"

    def __init__(self, gateway: InferenceGateway, validator: Optional[ProjectValidator] = None):
        super().__init__(validator)
        self.gateway = gateway

    def extract(self, text: str) -> Optional[List[Project]]:
        result = self.gateway.call_text_model(
            PromptHandler.build_project_prompt(text),
            max_tokens=1024,
            temperature=0.1
        )
        if not result.ok:
            logger.warning(f"Remote extraction unavailable ({result.status.value}: {result.reason})")
            return None

        items = PromptHandler.extract_json_array(result.value)
        if items is None:
            logger.warning("Remote extraction returned no JSON array")
            return None

        projects = []
        for item in items:
            if not isinstance(item, dict) or not item.get('title') or not item.get('description'):
                continue
            technologies = item.get('technologies') or []
            achievements = item.get('achievements') or []
            if isinstance(technologies, str):
                technologies = technologies.split(',')
            if isinstance(achievements, str):
                achievements = [achievements]
            if not isinstance(technologies, list) or not isinstance(achievements, list):
                continue
            project = self.validator.build(
                str(item['title']),
                str(item['description']),
                technologies=[str(t) for t in technologies],
                achievements=[str(a) for a in achievements],
                duration=item.get('duration') if isinstance(item.get('duration'), str) else None,
                role=item.get('role') if isinstance(item.get('role'), str) else None
            )
            if project:
                projects.append(project)
            if len(projects) >= REMOTE_LIMIT:
                break

        return projects or None

class RegexExtraction(ExtractionStrategy):
    name = "regex"

    @staticmethod
    def non_project_spans(text: str) -> List[Tuple[int, int]]:
        """Character ranges of EDUCATION/SKILLS/EXPERIENCE/CERTIFICATIONS blocks."""
        headings = sorted(
            [(m.start(), False) for m in PROJECT_HEADING.finditer(text)]
            + [(m.start(), True) for m in SECTION_HEADING.finditer(text)]
        )
        spans = []
        for i, (start, excluded) in enumerate(headings):
            if excluded:
                end = headings[i + 1][0] if i + 1 < len(headings) else len(text)
                spans.append((start, end))
        return spans

    def project_sections(self, text: str) -> List[str]:
        """Candidate sections from the PROJECTS block and from title/body shapes."""
        sections = []
        excluded = self.non_project_spans(text)

        heading = PROJECT_HEADING.search(text)
        if heading:
            end = SECTION_HEADING.search(text, heading.end())
            block = text[heading.end():end.start() if end else len(text)]
            sections.extend(
                chunk for chunk in BULLET_SPLIT.split(block)
                if len(chunk.strip()) >= MIN_BULLET_CHARS
            )

        for pattern in TITLE_BODY_PATTERNS:
            for match in pattern.finditer(text):
                if any(start <= match.start(1) < end for start, end in excluded):
                    continue
                title = (match.group(1) or '').strip()
                body = (match.group(2) or '').strip()
                if PROJECT_HEADING.fullmatch(title) or SECTION_HEADING.fullmatch(title):
                    continue
                if len(title) > 5 and len(body) > 20:
                    sections.append(f"{title}\n{body}")

        return [section for section in sections if len(section.strip()) > 30]

    def parse_section(self, section: str) -> Optional[Project]:
        lines = [line.strip() for line in section.split('\n') if line.strip()]
        if not lines:
            return None
        title = clean_title(lines[0])
        description = ' '.join(lines[1:]).strip() or title
        return self.validator.build(
            title,
            description,
            technologies=match_technologies(f"{title}\n{description}"),
            achievements=extract_achievements(description)
        )

    def extract(self, text: str) -> Optional[List[Project]]:
        projects = []
        seen_titles = set()
        for section in self.project_sections(text):
            project = self.parse_section(section)
            if not project or project.title.lower() in seen_titles:
                continue
            seen_titles.add(project.title.lower())
            projects.append(project)
            if len(projects) >= REGEX_LIMIT:
                break
        return projects or None

class EmergencyExtraction(ExtractionStrategy):
    name = "emergency"

    def extract(self, text: str) -> Optional[List[Project]]:
        projects = []
        paragraphs = [p for p in re.split(r'\n\s*\n', text) if len(p) > MIN_PARAGRAPH_CHARS]

        for paragraph in paragraphs:
            if len(projects) >= EMERGENCY_LIMIT:
                break
            hits = EMERGENCY_TECH_PATTERN.findall(paragraph)
            if len(hits) < 2:
                continue

            first_line = clean_title(paragraph.strip().split('\n')[0])
            if len(first_line) > 10:
                title = first_line[:EMERGENCY_TITLE_CHARS]
            else:
                title = f"Project {len(projects) + 1}"
            if any(p.title == title.strip() for p in projects):
                continue

            project = self.validator.build(
                title,
                paragraph.strip()[:EMERGENCY_DESCRIPTION_CHARS],
                technologies=[hit.lower() for hit in hits],
                achievements=extract_achievements(paragraph)
            )
            if project:
                projects.append(project)

        return projects or None

class ProjectExtractor:
    """Runs the extraction tiers in order and keeps the first non-empty result."""

    def __init__(self, gateway: Optional[InferenceGateway] = None, config: Optional[PipelineConfig] = None,
                 strategies: Optional[List[ExtractionStrategy]] = None):
        self.config = config or PipelineConfig()
        self.gateway = gateway
        self.strategies = strategies if strategies is not None else self.default_strategies()

    def default_strategies(self) -> List[ExtractionStrategy]:
        validator = ProjectValidator()
        strategies: List[ExtractionStrategy] = []
        if self.gateway is not None and self.config.resume_parser != "local":
            strategies.append(RemoteExtraction(self.gateway, validator))
        strategies.append(RegexExtraction(validator))
        strategies.append(EmergencyExtraction(validator))
        return strategies

    def extract_projects(self, resume_text: str) -> List[Project]:
        if not resume_text or len(resume_text.strip()) < self.config.min_resume_chars:
            logger.info("Resume text too short for project extraction")
            return []

        text = clean_resume_text(resume_text)
        for strategy in self.strategies:
            projects = strategy.extract(text)
            if projects:
                logger.info(f"{strategy.name} extraction produced {len(projects)} projects")
                return projects[:MAX_PROJECTS]
            logger.info(f"{strategy.name} extraction found no projects, trying next tier")

        logger.warning("All extraction tiers came back empty")
        return []
