import json
import pytest

from interview_ai.config import PipelineConfig
from interview_ai.project_extractor import (
    EmergencyExtraction,
    ProjectExtractor,
    ProjectValidator,
    RegexExtraction,
    clean_resume_text,
    extract_achievements,
    match_technologies,
)

PROJECT_BULLETS = [
    "Inventory Sync - service that mirrors warehouse stock into the storefront with Python and Docker",
    "Chat Relay - realtime messaging backend written in Node.js with Redis pub/sub for fan-out",
    "Budget Planner - single page app in React that forecasts monthly spending from bank exports",
    "Route Finder - shortest path planner for delivery drivers using Java and PostgreSQL storage",
    "Photo Vault - encrypted photo backup on AWS with a Flask API and nightly jobs",
    "Lint Bot - GitHub app that comments on pull requests with Jenkins pipeline results",
]

EMERGENCY_RESUME = (
    "alex kim\n"
    "\n"
    "worked on an inventory dashboard for the warehouse team using react and node with a sql backend, "
    "deployed on docker containers for every store\n"
    "\n"
    "wrote a python service to ingest supplier feeds, exposing a small api for the frontend and "
    "caching lookups in memory\n"
)

def resume_with_projects(bullets):
    lines = ["Sam Rivera", "sam@example.com", "", "PROJECTS"]
    lines += [f"• {bullet}" for bullet in bullets]
    lines += ["", "EXPERIENCE", "Software Engineer at Acme Corp"]
    return "\n".join(lines)

@pytest.fixture
def validator():
    return ProjectValidator()

class TestHelpers:
    def test_clean_resume_text(self):
        assert clean_resume_text("A\r\nB\n\n\n\nC\n") == "A\nB\n\nC"

    def test_match_technologies_dedupes_in_order(self):
        text = "Built with Node.js and React, then React Native; NODE services on Docker"
        assert match_technologies(text) == ["node", "react", "docker"]

    def test_match_technologies_word_boundaries(self):
        assert match_technologies("JavaScript everywhere") == ["javascript"]
        assert match_technologies("I will rest next week") == []

    def test_extract_achievements(self):
        text = "Built a cache layer. Fun. Reduced page load time by half; wrote docs. Deployed to production servers!"
        assert extract_achievements(text) == [
            "Built a cache layer",
            "Reduced page load time by half",
            "Deployed to production servers",
        ]

class TestProjectValidator:
    @pytest.mark.parametrize("title,description", [
        ("B.Tech Computer Science", "Graduated with distinction from the program in 2020."),
        ("Campus Portal", "Final year work at the university with a CGPA of 9.1 overall."),
        ("Technical Skills", "Python, Java, SQL, Docker, Kubernetes and friends."),
        ("Smart India Hackathon", "Reached the national finals with a team of five people."),
    ])
    def test_rejects_boilerplate(self, validator, title, description):
        assert validator.build(title, description) is None

    def test_rejects_short_fields(self, validator):
        assert validator.build("ab", "A long enough description here.") is None
        assert validator.build("Valid Title", "too short") is None

    def test_truncates_long_fields(self, validator):
        project = validator.build("T" * 150, "d" * 800)
        assert len(project.title) == 100
        assert len(project.description) == 500

    def test_does_not_reject_ordinary_words(self, validator):
        project = validator.build("Ledger", "A service that will be used to reconcile payments between banks.")
        assert project is not None

class TestRegexExtraction:
    def test_single_bullet_project(self, sample_resume, local_config):
        """A PROJECTS heading with one long bullet yields exactly one project"""
        projects = ProjectExtractor(config=local_config).extract_projects(sample_resume)

        assert len(projects) == 1
        project = projects[0]
        assert project.title.startswith("TaskFlow")
        assert "react" in project.technologies
        assert "node" in project.technologies

    def test_caps_at_four(self):
        text = clean_resume_text(resume_with_projects(PROJECT_BULLETS))
        projects = RegexExtraction().extract(text)
        assert len(projects) == 4
        assert projects[0].title.startswith("Inventory Sync")

    def test_title_and_description_lines(self):
        text = clean_resume_text(
            "PROJECTS\n"
            "- Project: Weather Station\n"
            "  Implemented a sensor hub with Python and MQTT that stores readings in PostgreSQL.\n"
            "  Reduced manual data entry for the lab to zero.\n"
        )
        projects = RegexExtraction().extract(text)
        assert projects[0].title == "Weather Station"
        assert projects[0].description.startswith("Implemented a sensor hub")
        assert projects[0].technologies == ["python", "postgres"]
        assert projects[0].achievements[0].startswith("Implemented a sensor hub")

    def test_no_duplicate_titles(self):
        text = clean_resume_text(
            "Title: Order Tracker\n"
            "Designed an order tracking service with Django and Redis for a local bakery.\n"
        )
        projects = RegexExtraction().extract(text)
        titles = [p.title.lower() for p in projects]
        assert len(titles) == len(set(titles))

    def test_experience_entries_are_not_projects(self, local_config):
        resume = (
            "Jane Doe\n"
            "jane.doe@example.com\n"
            "\n"
            "PROJECTS\n"
            "• TaskFlow: a collaborative task tracker built with React and Node.js for small teams\n"
            "\n"
            "EXPERIENCE\n"
            "Software Engineer at Acme Corp\n"
            "Built internal dashboards for the sales team using Django and Postgres.\n"
            "Maintained the deployment pipeline on AWS.\n"
        )
        projects = ProjectExtractor(config=local_config).extract_projects(resume)

        assert len(projects) == 1
        assert projects[0].title.startswith("TaskFlow")

    def test_title_body_outside_sections_still_found(self):
        text = clean_resume_text(
            "EXPERIENCE\n"
            "Software Engineer at Acme Corp\n"
            "\n"
            "PROJECTS\n"
            "Weather Station Dashboard\n"
            "Implemented a sensor hub with Python and MQTT that stores readings in PostgreSQL.\n"
        )
        spans = RegexExtraction.non_project_spans(text)
        assert spans == [(0, text.index("PROJECTS"))]
        projects = RegexExtraction().extract(text)
        assert [p.title for p in projects] == ["Weather Station Dashboard"]

    def test_nothing_found(self):
        assert RegexExtraction().extract("just some lowercase words without any structure at all") is None

class TestEmergencyExtraction:
    def test_paragraph_heuristic(self, local_config):
        projects = ProjectExtractor(config=local_config).extract_projects(EMERGENCY_RESUME)

        assert len(projects) == 2
        first = projects[0]
        assert first.title == "worked on an inventory dashboard for the warehouse team usin"
        assert first.technologies == ["react", "node", "sql", "backend", "docker"]
        assert len(first.description) <= 400
        assert first.achievements

    def test_caps_at_three(self):
        paragraph = "built a backend api in python for the ops team so reports are generated nightly for managers"
        text = "\n\n".join(f"job {i}: {paragraph}" for i in range(5))
        projects = EmergencyExtraction().extract(text)
        assert len(projects) == 3

class TestRemoteExtraction:
    def test_uses_model_output(self, gateway_factory):
        payload = [
            {"title": "Chat App", "description": "Realtime chat built with React and Socket.io.",
             "technologies": ["React", "Socket.io"], "achievements": ["Built presence indicators"]},
            {"title": "Missing description"},
        ]
        gateway = gateway_factory(text="Here you go:\n" + json.dumps(payload))
        projects = ProjectExtractor(gateway, PipelineConfig()).extract_projects("x" * 200)

        assert len(projects) == 1
        assert projects[0].title == "Chat App"
        assert projects[0].technologies == ["react", "socket.io"]
        assert len(gateway.text_calls) == 1

    def test_comma_separated_technologies(self, gateway_factory):
        payload = [{"title": "Chat App", "description": "Realtime chat built with React and Node.",
                    "technologies": "React, Node , ", "achievements": "Built presence indicators"}]
        gateway = gateway_factory(text=json.dumps(payload))
        projects = ProjectExtractor(gateway, PipelineConfig()).extract_projects("x" * 200)

        assert len(projects) == 1
        assert projects[0].technologies == ["react", "node"]
        assert projects[0].achievements == ["Built presence indicators"]

    def test_caps_at_five(self, gateway_factory):
        payload = [
            {"title": f"Service {i}", "description": "Internal service for routing shipments quickly."}
            for i in range(8)
        ]
        gateway = gateway_factory(text=json.dumps(payload))
        projects = ProjectExtractor(gateway, PipelineConfig()).extract_projects("x" * 200)
        assert len(projects) == 5

    def test_garbage_falls_through_to_regex(self, gateway_factory, sample_resume):
        gateway = gateway_factory(text="I cannot help with that.")
        projects = ProjectExtractor(gateway, PipelineConfig()).extract_projects(sample_resume)
        assert len(projects) == 1
        assert projects[0].title.startswith("TaskFlow")

    def test_timeout_falls_through(self, failing_gateway, sample_resume):
        projects = ProjectExtractor(failing_gateway, PipelineConfig()).extract_projects(sample_resume)
        assert len(projects) == 1
        assert failing_gateway.text_calls

    def test_local_parser_skips_model(self, gateway_factory, sample_resume):
        gateway = gateway_factory(text="[]")
        config = PipelineConfig(resume_parser="local")
        ProjectExtractor(gateway, config).extract_projects(sample_resume)
        assert gateway.text_calls == []

class TestExtractorInvariants:
    @pytest.mark.parametrize("text", [
        "",
        "   ",
        "too short to matter",
        "EDUCATION\nB.Tech, Some University, CGPA 8.9\n\nSKILLS\nPython, Java, SQL, Docker, React and Node",
    ])
    def test_empty_or_boilerplate_resumes(self, local_config, text):
        assert ProjectExtractor(config=local_config).extract_projects(text) == []

    @pytest.mark.parametrize("text", [
        resume_with_projects(PROJECT_BULLETS),
        EMERGENCY_RESUME,
        "Senior Engineer with broad experience\nLed teams building React and Node platforms for retail clients\n"
        "Mentored developers and ran architecture reviews every sprint\n\nEDUCATION\nMSc, Tech University",
    ])
    def test_returned_projects_are_valid(self, local_config, text):
        projects = ProjectExtractor(config=local_config).extract_projects(text)
        assert 0 <= len(projects) <= 5
        for project in projects:
            assert 3 <= len(project.title) <= 100
            assert 10 <= len(project.description) <= 500
            assert not ProjectValidator.is_invalid_text(project.title)
            assert not ProjectValidator.is_invalid_text(project.description)

    def test_deterministic(self, local_config, sample_resume):
        extractor = ProjectExtractor(config=local_config)
        assert extractor.extract_projects(sample_resume) == extractor.extract_projects(sample_resume)
