from typing import Any, List, Optional
import json
import logging
import re

from .schemas import Project

logger = logging.getLogger(__name__)

RESUME_PROMPT_CHARS = 3000
PROMPT_TECHNOLOGIES = 6

class PromptHandler:
    @classmethod
    def build_project_prompt(cls, resume_text: str) -> str:
        """Prompt asking the model to pull project records out of a resume."""
        return f"""Extract all technical projects from this resume. Return ONLY a JSON array of project objects with: title, description, technologies[], achievements[].

Resume:
{resume_text[:RESUME_PROMPT_CHARS]}

Format: [{{"title": "...", "description": "...", "technologies": ["...", "..."], "achievements": ["..."]}}]"""

    @classmethod
    def build_question_prompt(cls, project: Project) -> str:
        """Prompt asking for exactly four questions about one project."""
        technologies = ', '.join(project.technologies[:PROMPT_TECHNOLOGIES])
        return f"""Generate 4 concise interview questions for the following project. Return ONLY a JSON array of objects with keys: questionText, category, expectedPoints.

Project: {project.title}
Description: {project.description}
Technologies: {technologies}"""

    @classmethod
    def extract_json_array(cls, text: str) -> Optional[List[Any]]:
        """
        Find the first JSON array in model output.

        Tries the whole text, then every balanced [...] span from left to right,
        then the widest bracketed span. Returns None when nothing parses to a list.
        """
        if not text:
            return None

        try:
            parsed = json.loads(text)
            if isinstance(parsed, list):
                return parsed
        except json.JSONDecodeError:
            pass

        start = text.find('[')
        while start != -1:
            depth = 0
            in_string = False
            escaped = False
            for i in range(start, len(text)):
                char = text[i]
                if in_string:
                    if escaped:
                        escaped = False
                    elif char == '\\':
                        escaped = True
                    elif char == '"':
                        in_string = False
                    continue
                if char == '"':
                    in_string = True
                elif char == '[':
                    depth += 1
                elif char == ']':
                    depth -= 1
                    if depth == 0:
                        try:
                            parsed = json.loads(text[start:i + 1])
                            if isinstance(parsed, list):
                                return parsed
                        except json.JSONDecodeError:
                            pass
                        break
            start = text.find('[', start + 1)

        match = re.search(r'\[[\s\S]*\]', text)
        if match:
            try:
                parsed = json.loads(match.group(0))
                if isinstance(parsed, list):
                    return parsed
            except json.JSONDecodeError:
                logger.debug("Bracketed span in model output is not valid JSON")

        return None
