"""Records kept by the hosted store: companies, their page sections and jobs."""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

from careers import config

SectionType = Literal["about", "culture", "benefits", "values", "team", "custom"]


def split_items(text: str) -> list[str]:
    """Split a newline separated block into list items, dropping bullets and blanks."""
    items = []
    for line in text.splitlines():
        item = line.strip()
        if item.startswith("•"):
            item = item[1:].strip()
        if item:
            items.append(item)
    return items


class ContentSection(BaseModel):
    id: str
    type: SectionType = "custom"
    title: str
    content: str
    order: int = 0


class Company(BaseModel):
    id: str
    user_id: str
    slug: str
    name: str
    tagline: Optional[str] = None
    description: Optional[str] = None
    logo_url: Optional[str] = None
    banner_url: Optional[str] = None
    culture_video_url: Optional[str] = None
    primary_color: str = config.DEFAULT_PRIMARY_COLOR
    secondary_color: str = config.DEFAULT_SECONDARY_COLOR
    content_sections: list[ContentSection] = Field(default_factory=list)
    is_published: bool = False
    created_at: str = ""
    updated_at: str = ""


class Job(BaseModel):
    id: str
    company_id: str = ""
    title: str
    department: Optional[str] = None
    location: str
    job_type: str
    experience_level: Optional[str] = None
    description: Optional[str] = None
    responsibilities: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    salary_currency: str = config.DEFAULT_CURRENCY
    is_active: bool = True
    application_url: Optional[str] = None
    location_type: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @field_validator("is_active", mode="before")
    @classmethod
    def _unset_means_active(cls, value):
        # only an explicit False hides a job
        return True if value is None else value

    @field_validator("responsibilities", "qualifications", "benefits", mode="before")
    @classmethod
    def _item_list(cls, value):
        if value is None:
            return []
        if isinstance(value, str):
            return split_items(value)
        return value

    @field_validator("salary_currency", mode="before")
    @classmethod
    def _default_currency(cls, value):
        return value or config.DEFAULT_CURRENCY
