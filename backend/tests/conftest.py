"""Shared test configuration and fixtures."""

import pytest

from config import AtsPolicy
from models.cv import (
    CVDocument,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    Project,
    Skills,
)

SAMPLE_JD = """Senior Backend Engineer

Requirements:
- 5+ years of experience with Python and FastAPI
- Experience with Docker, Kubernetes and AWS
- Strong knowledge of PostgreSQL and REST API design
- CI/CD pipelines and automated testing
- Excellent communication and leadership skills
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "network: talks to real job boards (skipped by default)"
    )


@pytest.fixture
def policy() -> AtsPolicy:
    return AtsPolicy()


@pytest.fixture
def sample_cv() -> CVDocument:
    return CVDocument(
        personal_info=PersonalInfo(
            first_name="Jane",
            last_name="Doe",
            title="Backend Engineer",
            email="jane.doe@example.com",
            phone="+1 555 123 4567",
            location="Berlin, Germany",
            linkedin="linkedin.com/in/janedoe",
        ),
        summary=(
            "Backend engineer with six years of experience building Python services, "
            "REST APIs and cloud infrastructure for high-traffic products."
        ),
        experience=[
            ExperienceEntry(
                title="Senior Software Engineer",
                company="TechCorp",
                location="Berlin",
                start_date="2020-01",
                current=True,
                bullets=[
                    "Led a team of 5 engineers to reduce latency by 30%",
                    "Built REST APIs in Python and FastAPI serving 2M requests per day",
                    "Migrated services to Docker and Kubernetes on AWS",
                ],
            ),
            ExperienceEntry(
                title="Software Engineer",
                company="StartupXYZ",
                start_date="2017-06",
                end_date="2019-12",
                bullets=[
                    "Designed PostgreSQL schemas for the billing platform",
                    "Automated CI/CD pipelines, cutting release time by 50%",
                ],
            ),
        ],
        education=[
            EducationEntry(degree="B.Sc.", field="Computer Science", school="TU Berlin", end_date="2017"),
        ],
        skills=Skills(
            technical=["Python", "FastAPI", "Docker", "Kubernetes", "AWS", "PostgreSQL"],
            soft=["communication", "leadership"],
            languages=["English", "German"],
        ),
        projects=[
            Project(name="ats-cli", description="Command line ATS checker", technologies=["Python"]),
        ],
    )


@pytest.fixture
def sample_jd() -> str:
    return SAMPLE_JD
