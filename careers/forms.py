"""Editable views of companies and jobs, validated with pydantic.

Each form knows how to build its defaults from a stored record and how to
read submitted HTML form data. The editor diffs defaults against submitted
values to find what to save.
"""

import re
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, HttpUrl, TypeAdapter, ValidationError, field_validator

from careers import config
from careers.models import Company, ContentSection, Job, split_items

COLOR_RE = re.compile(r"^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$")
SLUG_RE = re.compile(r"^[a-z0-9-]+$")
JOB_TYPES = ["Full-time", "Part-time", "Contract", "Internship", "Temporary"]
LIST_FIELDS = ("responsibilities", "qualifications", "benefits")

_url = TypeAdapter(HttpUrl)


def slugify(name: str) -> str:
    slug = re.sub(r"\s+", "-", name.lower())
    return re.sub(r"[^a-z0-9-]", "", slug)


def _check_url(value: str, message: str) -> str:
    if value == "":
        return value
    try:
        _url.validate_python(value)
    except ValidationError:
        raise ValueError(message) from None
    return value


def _check_salary(value: str) -> str:
    if value and not value.strip().isdigit():
        raise ValueError("Salary must be a whole number")
    return value.strip()


def _text(value: Any) -> str:
    # browsers submit textarea line breaks as CRLF; stored text uses LF
    return str(value).replace("\r\n", "\n")


def _flag(data: Mapping[str, Any], name: str) -> bool:
    # unchecked checkboxes are absent from the submission
    return str(data.get(name, "")).lower() in ("on", "true", "1", "yes")


class JobForm(BaseModel):
    title: str = Field(default="", min_length=2)
    department: str = ""
    location: str = Field(default="", min_length=2)
    job_type: str = "Full-time"
    experience_level: str = ""
    description: str = ""
    responsibilities: list[str] = Field(default_factory=list)
    qualifications: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    salary_min: str = ""
    salary_max: str = ""
    salary_currency: str = config.DEFAULT_CURRENCY
    application_url: str = ""
    is_active: bool = True

    @field_validator(*LIST_FIELDS)
    @classmethod
    def _items_not_empty(cls, items: list[str]) -> list[str]:
        if any(not item for item in items):
            raise ValueError("Item cannot be empty")
        return items

    @field_validator("salary_min", "salary_max")
    @classmethod
    def _whole_number(cls, value: str) -> str:
        return _check_salary(value)

    @field_validator("application_url")
    @classmethod
    def _valid_url(cls, value: str) -> str:
        return _check_url(value, "Please enter a valid URL")

    @classmethod
    def from_job(cls, job: Optional[Job]) -> "JobForm":
        """Form defaults: the job's current values, or a blank full-time posting."""
        if job is None:
            return cls.model_construct()
        return cls.model_construct(
            title=job.title or "",
            department=job.department or "",
            location=job.location or "",
            job_type=job.job_type or "Full-time",
            experience_level=job.experience_level or "",
            description=job.description or "",
            responsibilities=list(job.responsibilities),
            qualifications=list(job.qualifications),
            benefits=list(job.benefits),
            salary_min=str(job.salary_min) if job.salary_min is not None else "",
            salary_max=str(job.salary_max) if job.salary_max is not None else "",
            salary_currency=job.salary_currency or config.DEFAULT_CURRENCY,
            application_url=job.application_url or "",
            is_active=job.is_active,
        )

    @classmethod
    def from_form_data(cls, data: Mapping[str, Any]) -> "JobForm":
        values = {
            name: _text(data.get(name, "")).strip()
            for name in ("title", "department", "location", "job_type", "experience_level",
                         "description", "salary_min", "salary_max", "application_url")
        }
        values["description"] = _text(data.get("description", ""))
        values["job_type"] = values["job_type"] or "Full-time"
        values["salary_currency"] = str(data.get("salary_currency", "")).strip() or config.DEFAULT_CURRENCY
        for name in LIST_FIELDS:
            values[name] = split_items(str(data.get(name, "")))
        values["is_active"] = _flag(data, "is_active")
        return cls(**values)

    def to_payload(self) -> dict[str, Any]:
        """Values in the shape the store keeps for a job."""
        payload = self.model_dump()
        payload.update(self.convert(payload))
        return payload

    @staticmethod
    def convert(values: Mapping[str, Any]) -> dict[str, Any]:
        """Store representation of the text-typed salary and URL fields in ``values``."""
        out: dict[str, Any] = {}
        for name in ("salary_min", "salary_max"):
            if name in values:
                out[name] = int(values[name]) if values[name] else None
        if "application_url" in values:
            out["application_url"] = values["application_url"] or None
        return out


class BrandingForm(BaseModel):
    name: str = Field(min_length=2)
    tagline: str = ""
    description: str = ""
    logo_url: str = ""
    banner_url: str = ""
    culture_video_url: str = ""
    primary_color: str = config.DEFAULT_PRIMARY_COLOR
    secondary_color: str = config.DEFAULT_SECONDARY_COLOR
    is_published: bool = False

    @field_validator("logo_url")
    @classmethod
    def _logo(cls, value: str) -> str:
        return _check_url(value, "Invalid logo URL")

    @field_validator("banner_url")
    @classmethod
    def _banner(cls, value: str) -> str:
        return _check_url(value, "Invalid banner URL")

    @field_validator("culture_video_url")
    @classmethod
    def _video(cls, value: str) -> str:
        return _check_url(value, "Invalid video URL")

    @field_validator("primary_color", "secondary_color")
    @classmethod
    def _color(cls, value: str) -> str:
        if not COLOR_RE.match(value):
            raise ValueError("Invalid color format")
        return value

    @classmethod
    def from_company(cls, company: Company) -> "BrandingForm":
        return cls.model_construct(
            name=company.name,
            tagline=company.tagline or "",
            description=company.description or "",
            logo_url=company.logo_url or "",
            banner_url=company.banner_url or "",
            culture_video_url=company.culture_video_url or "",
            primary_color=company.primary_color,
            secondary_color=company.secondary_color,
            is_published=company.is_published,
        )

    @classmethod
    def from_form_data(cls, data: Mapping[str, Any]) -> "BrandingForm":
        values = {
            name: _text(data.get(name, "")).strip()
            for name in ("name", "tagline", "description", "logo_url", "banner_url",
                         "culture_video_url", "primary_color", "secondary_color")
        }
        values["is_published"] = _flag(data, "is_published")
        return cls(**values)


class SectionForm(ContentSection):
    title: str = Field(min_length=1)
    content: str = Field(min_length=1)


def sections_from_form_data(data) -> list[ContentSection]:
    """Read parallel ``section_id``/``section_type``/``section_title``/``section_content`` fields.

    Sections are numbered by their position in the submission.
    """
    rows = zip(
        data.getlist("section_id"),
        data.getlist("section_type"),
        data.getlist("section_title"),
        data.getlist("section_content"),
    )
    return [
        ContentSection(
            id=sid,
            type=stype or "custom",
            title=str(title).strip(),
            content=_text(content).strip(),
            order=index,
        )
        for index, (sid, stype, title, content) in enumerate(rows)
    ]


class ContentForm(BaseModel):
    content_sections: list[SectionForm] = Field(default_factory=list)

    @classmethod
    def from_company(cls, company: Company) -> "ContentForm":
        sections = sorted(company.content_sections, key=lambda s: s.order)
        return cls.model_construct(
            content_sections=[SectionForm.model_construct(**s.model_dump()) for s in sections]
        )

    @classmethod
    def from_form_data(cls, data) -> "ContentForm":
        return cls(content_sections=[s.model_dump() for s in sections_from_form_data(data)])


class CompanyForm(BaseModel):
    name: str = Field(min_length=2)
    slug: str = ""
    tagline: str = ""
    description: str = ""

    @field_validator("slug")
    @classmethod
    def _slug(cls, value: str) -> str:
        if not SLUG_RE.match(value):
            raise ValueError("Use lowercase letters, numbers and hyphens only")
        return value

    @classmethod
    def from_form_data(cls, data: Mapping[str, Any]) -> "CompanyForm":
        name = str(data.get("name", "")).strip()
        slug = str(data.get("slug", "")).strip() or slugify(name)
        return cls(
            name=name,
            slug=slug,
            tagline=str(data.get("tagline", "")).strip(),
            description=_text(data.get("description", "")).strip(),
        )


def form_errors(exc: ValidationError) -> dict[str, str]:
    """First message per field, keyed by dotted location."""
    errors: dict[str, str] = {}
    for err in exc.errors():
        key = ".".join(str(part) for part in err["loc"]) or "__root__"
        message = err["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(key, message)
    return errors


__all__ = [
    "BrandingForm", "CompanyForm", "ContentForm", "JOB_TYPES", "JobForm",
    "SectionForm", "form_errors", "sections_from_form_data", "slugify",
]
