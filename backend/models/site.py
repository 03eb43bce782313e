"""Site artifact and the response contract a generation result must satisfy."""
from dataclasses import dataclass
from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator


@dataclass(frozen=True)
class Artifact:
    """A generated, self-contained HTML document and its one-line description."""
    body: str
    summary: str
    created_at: datetime


class SitePayload(BaseModel):
    """
    Structured shape returned by the generative service.

    Both fields are required and must contain more than whitespace; any other
    keys the service adds are ignored.
    """
    model_config = ConfigDict(extra="ignore")

    body: str = Field(
        description=(
            "The full, single-file HTML code for the requested website. Must include "
            "<!DOCTYPE html>, <html>, <head> with the Tailwind CDN script, and <body>."
        )
    )
    summary: str = Field(
        description="A very brief, one-sentence description of what was built."
    )

    @field_validator("body", "summary")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value


# JSON schema sent to the service alongside the style ruleset
RESPONSE_SCHEMA = SitePayload.model_json_schema()
