from collections import Counter
from itertools import combinations
from typing import Optional, Sequence
import logging
import re

from .schemas import Project, SkillAssessment, SkillLevel

logger = logging.getLogger('skill_assessment')

SENIOR_ROLE = re.compile(r'lead|senior|architect', re.IGNORECASE)

# level, minimum distinct technologies, minimum average complexity, checked top down
LEVEL_THRESHOLDS = [
    (SkillLevel.LEAD, 15, 3.5),
    (SkillLevel.SENIOR, 10, 2.5),
    (SkillLevel.MID_LEVEL, 6, 2.0),
]

LEVEL_PROFILES = {
    SkillLevel.LEAD: (
        '7+ years',
        ['Extensive technology stack', 'Complex project experience', 'Leadership'],
        ['Focus on strategic decisions and mentoring'],
    ),
    SkillLevel.SENIOR: (
        '4-7 years',
        ['Strong technical foundation', 'Diverse projects'],
        ['Deepen system design and leadership skills'],
    ),
    SkillLevel.MID_LEVEL: (
        '2-4 years',
        ['Solid project experience', 'Growing expertise'],
        ['Expand architecture knowledge and scale-up experience'],
    ),
    SkillLevel.JUNIOR: (
        '0-2 years',
        ['Foundation skills', 'Eagerness to learn'],
        ['Build more portfolio projects and focus on core CS concepts'],
    ),
}

def project_complexity(project: Project) -> int:
    complexity = 1
    if len(project.technologies) > 5:
        complexity += 1
    if len(project.description) > 200:
        complexity += 1
    if project.achievements:
        complexity += 1
    if project.role and SENIOR_ROLE.search(project.role):
        complexity += 1
    return complexity

def level_for(tech_count: int, complexity: float) -> SkillLevel:
    for level, min_techs, min_complexity in LEVEL_THRESHOLDS:
        if tech_count >= min_techs and complexity >= min_complexity:
            return level
    return SkillLevel.JUNIOR

def level_for_projects(projects: Sequence[Project]) -> SkillLevel:
    if not projects:
        return SkillLevel.JUNIOR
    tech_count = len({tech for project in projects for tech in project.technologies})
    complexity = sum(project_complexity(p) for p in projects) / len(projects)
    return level_for(tech_count, complexity)

def best_level(projects: Sequence[Project]) -> SkillLevel:
    """
    Highest level over the project set with any of its lead-role projects left out.

    A lead/senior/architect project can raise the estimate but never lower it
    by pulling the average complexity down.
    """
    led = [p for p in projects if p.role and SENIOR_ROLE.search(p.role)]
    others = [p for p in projects if p not in led]
    best = level_for_projects(projects)
    for size in range(len(led)):
        for kept in combinations(led, size):
            level = level_for_projects(others + list(kept))
            if level.rank > best.rank:
                best = level
    return best

def assess_skill_level(projects: Optional[Sequence[Project]]) -> SkillAssessment:
    """Coarse seniority estimate from technology breadth and project complexity."""
    projects = list(projects or [])
    if not projects:
        return SkillAssessment(
            level=SkillLevel.JUNIOR,
            years_estimate='0-2 years',
            strengths=['Basic foundation'],
            recommendations=['Build more projects']
        )

    all_technologies = [tech for project in projects for tech in project.technologies]
    tech_count = len(set(all_technologies))
    complexity = sum(project_complexity(p) for p in projects) / len(projects)

    level = best_level(projects)
    years_estimate, strengths, recommendations = LEVEL_PROFILES[level]
    strengths = list(strengths)

    top_technologies = [tech for tech, _ in Counter(all_technologies).most_common(3)]
    if top_technologies:
        strengths.insert(0, f"Strong in {', '.join(top_technologies)}")

    logger.info(f"Assessed {level.value}: {tech_count} technologies, complexity {complexity:.2f}")
    return SkillAssessment(
        level=level,
        years_estimate=years_estimate,
        strengths=strengths,
        recommendations=list(recommendations)
    )
