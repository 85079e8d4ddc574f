"""Presentation helpers for the public careers page."""

from typing import Optional

from pydantic import BaseModel

from careers.models import Company, ContentSection, Job


class DetailSection(BaseModel):
    title: str
    items: list[str]


class PageMetadata(BaseModel):
    title: str
    description: str


def sorted_sections(company: Company) -> list[ContentSection]:
    return sorted(company.content_sections, key=lambda s: s.order)


def detail_sections(job: Job) -> list[DetailSection]:
    """Non-empty item lists shown in a job's detail view."""
    sections = [
        DetailSection(title="Responsibilities", items=job.responsibilities),
        DetailSection(title="Qualifications", items=job.qualifications),
        DetailSection(title="Benefits", items=job.benefits),
    ]
    return [s for s in sections if s.items]


def salary_label(job: Job) -> Optional[str]:
    currency = job.salary_currency
    if job.salary_min and job.salary_max:
        return f"{currency} {job.salary_min:,} - {job.salary_max:,}"
    if job.salary_min:
        return f"From {currency} {job.salary_min:,}"
    if job.salary_max:
        return f"Up to {currency} {job.salary_max:,}"
    return None


def embed_video_url(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    return url.replace("watch?v=", "embed/")


def page_metadata(company: Optional[Company]) -> PageMetadata:
    if company is None:
        return PageMetadata(title="Careers Page Not Found", description="")
    return PageMetadata(
        title=f"Careers at {company.name}",
        description=company.tagline or company.description or f"Join the team at {company.name}",
    )


def positions_label(count: int) -> str:
    return f"{count} Open {'Position' if count == 1 else 'Positions'}"


__all__ = [
    "DetailSection", "PageMetadata", "detail_sections", "embed_video_url",
    "page_metadata", "positions_label", "salary_label", "sorted_sections",
]
