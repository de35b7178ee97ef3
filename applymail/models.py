from dataclasses import dataclass, fields
from typing import Dict, Any

from pydantic import BaseModel, ConfigDict, Field


DEFAULTS = {
    "name": "Candidate",
    "user_email": "candidate@email.com",
    "user_phone": "+91-XXXXXXXXXX",
    "hr_name": "HR Manager",
    "hr_email": "hr@company.com",
    "job_role": "Software Engineer",
    "company": "the company",
    "company_phone": "N/A",
    "education": "B.Tech in Computer Science",
    "skills": "Java, Python, JavaScript, React, and Node.js",
    "location": "India",
}

# attribute name -> JSON key
WIRE_NAMES = {
    "name": "name",
    "user_email": "userEmail",
    "user_phone": "userPhone",
    "hr_name": "hrName",
    "hr_email": "hrEmail",
    "job_role": "jobRole",
    "company": "company",
    "company_phone": "companyPhone",
    "education": "education",
    "skills": "skills",
    "location": "location",
}


@dataclass
class ApplicationContext:
    name: str = DEFAULTS["name"]
    user_email: str = DEFAULTS["user_email"]
    user_phone: str = DEFAULTS["user_phone"]
    hr_name: str = DEFAULTS["hr_name"]
    hr_email: str = ""  # blank: derived from company when sanitized
    job_role: str = DEFAULTS["job_role"]
    company: str = DEFAULTS["company"]
    company_phone: str = DEFAULTS["company_phone"]
    education: str = DEFAULTS["education"]
    skills: str = DEFAULTS["skills"]
    location: str = DEFAULTS["location"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ApplicationContext":
        """
        Build a context from camelCase wire fields.
        Values are taken as-is; missing keys keep the dataclass defaults.
        """
        kwargs = {}
        for attr, key in WIRE_NAMES.items():
            if key in data:
                kwargs[attr] = data[key]
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return {WIRE_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


@dataclass
class GeneratedEmail:
    subject: str
    body: str

    def to_dict(self) -> Dict[str, str]:
        return {"subject": self.subject, "body": self.body}


# ----- Output schemas handed to the model -----

class ExtractedFields(BaseModel):
    """Fields recovered from free text by the extraction call."""
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(description="Candidate name, or 'Candidate'")
    job_role: str = Field(alias="jobRole", description="Role if mentioned, or 'Software Engineer'")
    company: str = Field(description="Company if mentioned, or 'the company'")
    location: str = Field(description="Location if mentioned, or 'India'")


class EmailDraft(BaseModel):
    """A job application email as returned by the generation call."""

    subject: str = Field(description="Email subject line, under 90 characters")
    body: str = Field(description="Full email body using \\n for new lines")
