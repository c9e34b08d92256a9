from __future__ import annotations

from dataclasses import dataclass

from resume_analyzer.core.errors import ClientInputError

from .fields import FieldSchema, FieldSpec


@dataclass(frozen=True)
class AnalysisProfile:
    name: str
    schema: FieldSchema
    prompt_template: str
    job_title_field: str

    def build_prompt(self, resume_text: str) -> str:
        return self.prompt_template.format(resume_text=resume_text)


CAREER_SCHEMA = FieldSchema(
    fields=(
        FieldSpec(name="skills", label="Skills", aliases=("Key Skills",)),
        FieldSpec(name="experience", label="Experience", aliases=("Years of Experience",)),
        FieldSpec(name="jobTitles", label="Job Titles", aliases=("Possible Job Titles",)),
        FieldSpec(name="suggestions", label="Suggestions"),
        FieldSpec(name="elevatorPitch", label="Elevator Pitch"),
        FieldSpec(name="resumeScore", label="Resume Score", default="N/A", kind="score"),
    )
)

CAREER_PROMPT = """Analyze this resume text and extract:
1. Key skills (list 5-10, comma-separated)
2. Years of experience (estimate total)
3. Possible job titles (3-5, comma-separated)
4. Suggestions to improve the resume (3-5 bullet points)
5. Elevator pitch (short 3-5 sentence professional summary)
6. Resume score (a whole number from 0 to 100)

Respond exactly in this format:
Skills: [list]
Experience: [X years]
Job Titles: [list]
Suggestions: [bullet1]; [bullet2]; ...
Elevator Pitch: [paragraph]
Resume Score: [0-100]

Resume text: {resume_text}"""

HIRING_OUTLOOK_SCHEMA = FieldSchema(
    fields=(
        FieldSpec(name="keySkills", label="Key Skills", aliases=("Skills",)),
        FieldSpec(name="education", label="Education"),
        FieldSpec(name="experience", label="Experience"),
        FieldSpec(name="recommendedRoles", label="Recommended Roles", aliases=("Recommended Job Roles",)),
        FieldSpec(name="targetCompanies", label="Target Companies", aliases=("Companies",)),
    )
)

HIRING_OUTLOOK_PROMPT = """Analyze this resume and provide:
1. Key skills, education, and experience
2. Recommended job roles
3. Companies that might hire this person (both Indian and international)

Respond exactly in this format, one line per item:
Key Skills: [comma-separated list]
Education: [summary]
Experience: [summary]
Recommended Roles: [comma-separated list]
Target Companies: [comma-separated list]

Resume text:
{resume_text}"""

PROFILES = {
    "career": AnalysisProfile(
        name="career",
        schema=CAREER_SCHEMA,
        prompt_template=CAREER_PROMPT,
        job_title_field="jobTitles",
    ),
    "hiring_outlook": AnalysisProfile(
        name="hiring_outlook",
        schema=HIRING_OUTLOOK_SCHEMA,
        prompt_template=HIRING_OUTLOOK_PROMPT,
        job_title_field="recommendedRoles",
    ),
}

DEFAULT_PROFILE = "career"


def get_profile(name: str | None) -> AnalysisProfile:
    key = (name or DEFAULT_PROFILE).strip().lower().replace("-", "_") or DEFAULT_PROFILE
    profile = PROFILES.get(key)
    if profile is None:
        raise ClientInputError(
            f"Unknown analysis type '{name}'. Use one of: {', '.join(sorted(PROFILES))}."
        )
    return profile
