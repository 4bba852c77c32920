from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Job(BaseModel):
    """Job posting fields the core reads."""

    id: str
    title: str
    description: str = ""
    requirements: str = ""
    company_description: str = ""
    status: str = "active"

    model_config = ConfigDict(extra="allow")
