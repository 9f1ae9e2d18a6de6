from typing import Any

from pydantic import BaseModel, field_validator

OBJECTIVE_PROMPT = """Based on the following event details, write a concise and formal "Objective" section for an activity report. The output should be a single, well-written paragraph suitable for an official document.

--- Event Details ---
Title: {title}
Stated Objective: {objective}
Description: {description}

--- Instructions ---
- Synthesize the provided information into a formal objective statement.
- Do not use markdown, headings, or any special formatting.
- The output must be only a single block of text.
"""

MISSING_DETAILS = "Missing event details in request body."


class GenerationRequest(BaseModel):
    title: str
    objective: str
    description: str

    @field_validator("title", "objective", "description", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Any truthy value counts as provided, e.g. a numeric title.
        if value and not isinstance(value, str):
            return str(value)
        return value

    @field_validator("title", "objective", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("must not be blank")
        return value


def build_objective_prompt(request: GenerationRequest) -> str:
    return OBJECTIVE_PROMPT.format(
        title=request.title,
        objective=request.objective,
        description=request.description,
    )
