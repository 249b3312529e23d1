"""Structured CV document.

Every field is optional so partially filled drafts always validate.
"""

from pydantic import BaseModel, Field

DEFAULT_SECTION_ORDER = [
    "summary",
    "experience",
    "education",
    "skills",
    "projects",
    "certifications",
]


class PersonalInfo(BaseModel):
    first_name: str = ""
    last_name: str = ""
    title: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linkedin: str = ""
    website: str = ""
    photo_url: str = ""

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p).strip()


class ExperienceEntry(BaseModel):
    title: str = ""
    company: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    description: str = ""
    bullets: list[str] = []


class EducationEntry(BaseModel):
    degree: str = ""
    field: str = ""
    school: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    gpa: str = ""
    honors: str = ""


class Skills(BaseModel):
    technical: list[str] = []
    soft: list[str] = []
    languages: list[str] = []
    certifications: list[str] = []

    def all(self) -> list[str]:
        return self.technical + self.soft + self.languages + self.certifications


class Certification(BaseModel):
    name: str = ""
    issuer: str = ""
    date: str = ""


class Project(BaseModel):
    name: str = ""
    description: str = ""
    technologies: list[str] = []
    url: str = ""


class CVDocument(BaseModel):
    personal_info: PersonalInfo = PersonalInfo()
    summary: str = ""
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []
    skills: Skills = Skills()
    certifications: list[Certification] = []
    projects: list[Project] = []
    section_order: list[str] = Field(default_factory=lambda: list(DEFAULT_SECTION_ORDER))
