"""Dashboard operations on companies and jobs.

Saves of existing records go through ``changed_fields``: the form built from
the stored record is compared with the submitted one and only the differing
attributes are sent to the store. An empty change-set skips the store call.
"""

import time
from typing import Any, Optional

from pydantic import BaseModel

from careers.diff import changed_fields
from careers.forms import BrandingForm, CompanyForm, ContentForm, JobForm
from careers.logger import get_logger
from careers.models import Company, ContentSection, Job
from careers.store import RecordNotFound, RecordStore, utcnow

logger = get_logger(__name__)

COMPANIES = "companies"
JOBS = "jobs"


class CompanyNotFound(LookupError):
    def __init__(self, slug: str):
        super().__init__(f"No company with slug {slug!r}")
        self.slug = slug


class SlugTaken(ValueError):
    def __init__(self, slug: str):
        super().__init__("This URL is already taken. Please choose a different one.")
        self.slug = slug


class SaveResult(BaseModel):
    changed: dict[str, Any]
    record: Optional[dict[str, Any]] = None
    created: bool = False

    @property
    def saved(self) -> bool:
        return self.created or bool(self.changed)


class CompanyStats(BaseModel):
    company: Company
    job_count: int
    active_job_count: int


class DashboardStats(BaseModel):
    companies: list[CompanyStats]
    total_jobs: int
    total_active_jobs: int
    published_count: int


def get_company(store: RecordStore, slug: str, *, published_only: bool = False) -> Company:
    filters: dict[str, Any] = {"slug": slug}
    if published_only:
        filters["is_published"] = True
    rows = store.select(COMPANIES, **filters)
    if not rows:
        raise CompanyNotFound(slug)
    return Company.model_validate(rows[0])


def company_jobs(store: RecordStore, company_id: str, *, active_only: bool = False) -> list[Job]:
    """Jobs of a company, newest first."""
    where = (lambda r: r.get("is_active") is not False) if active_only else None
    rows = store.select(JOBS, where, order_by="created_at", descending=True, company_id=company_id)
    return [Job.model_validate(r) for r in rows]


def get_job(store: RecordStore, company: Company, job_id: str) -> Job:
    job = Job.model_validate(store.get(JOBS, job_id))
    if job.company_id != company.id:
        raise RecordNotFound(JOBS, job_id)
    return job


def dashboard_stats(store: RecordStore, user_id: str) -> DashboardStats:
    rows = store.select(COMPANIES, order_by="created_at", descending=True, user_id=user_id)
    stats = []
    for row in rows:
        company = Company.model_validate(row)
        jobs = company_jobs(store, company.id)
        stats.append(CompanyStats(
            company=company,
            job_count=len(jobs),
            active_job_count=sum(1 for j in jobs if j.is_active),
        ))
    return DashboardStats(
        companies=stats,
        total_jobs=sum(s.job_count for s in stats),
        total_active_jobs=sum(s.active_job_count for s in stats),
        published_count=sum(1 for s in stats if s.company.is_published),
    )


def default_sections(form: CompanyForm) -> list[ContentSection]:
    return [
        ContentSection(
            id="about",
            type="about",
            title="About Us",
            content=form.description or "We are building something great.",
            order=0,
        ),
        ContentSection(
            id="culture",
            type="culture",
            title="Life at " + form.name,
            content="Join our team and make an impact.",
            order=1,
        ),
    ]


def create_company(store: RecordStore, user_id: str, form: CompanyForm) -> Company:
    if store.select(COMPANIES, slug=form.slug):
        raise SlugTaken(form.slug)
    record = store.insert(COMPANIES, {
        "user_id": user_id,
        "name": form.name,
        "slug": form.slug,
        "tagline": form.tagline,
        "description": form.description,
        "content_sections": [s.model_dump() for s in default_sections(form)],
        "is_published": False,
    })
    logger.info(f"Created company {form.slug!r} for {user_id}")
    return Company.model_validate(record)


def _update(store: RecordStore, table: str, record_id: str, changes: dict[str, Any]) -> SaveResult:
    if not changes:
        return SaveResult(changed={})
    record = store.update(table, record_id, {**changes, "updated_at": utcnow()})
    logger.info(f"Saved {table}/{record_id}: {', '.join(sorted(changes))}")
    return SaveResult(changed=changes, record=record)


def save_branding(store: RecordStore, company: Company, form: BrandingForm) -> SaveResult:
    original = BrandingForm.from_company(company).model_dump()
    return _update(store, COMPANIES, company.id, changed_fields(original, form.model_dump()))


def save_sections(store: RecordStore, company: Company, form: ContentForm) -> SaveResult:
    original = ContentForm.from_company(company).model_dump()
    return _update(store, COMPANIES, company.id, changed_fields(original, form.model_dump()))


def save_job(store: RecordStore, company_id: str, job: Optional[Job], form: JobForm) -> SaveResult:
    """Insert a new job, or update only the changed attributes of ``job``."""
    if job is None:
        record = store.insert(JOBS, {**form.to_payload(), "company_id": company_id})
        logger.info(f"Created job {record['id']} for company {company_id}")
        return SaveResult(changed=form.to_payload(), record=record, created=True)

    changes = changed_fields(JobForm.from_job(job).model_dump(), form.model_dump())
    changes.update(JobForm.convert(changes))
    return _update(store, JOBS, job.id, changes)


def delete_job(store: RecordStore, job_id: str) -> None:
    store.delete(JOBS, job_id)
    logger.info(f"Deleted job {job_id}")


def add_section(sections: list[ContentSection]) -> list[ContentSection]:
    return [*sections, ContentSection(
        id=f"section-{int(time.time() * 1000)}",
        type="custom",
        title="",
        content="",
        order=len(sections),
    )]


def move_section(sections: list[ContentSection], index: int, offset: int) -> list[ContentSection]:
    """Move the section at ``index`` by ``offset`` places and renumber orders."""
    target = index + offset
    if not (0 <= index < len(sections) and 0 <= target < len(sections)):
        return list(sections)
    moved = list(sections)
    moved.insert(target, moved.pop(index))
    return [s.model_copy(update={"order": i}) for i, s in enumerate(moved)]


def remove_section(sections: list[ContentSection], index: int) -> list[ContentSection]:
    kept = [s for i, s in enumerate(sections) if i != index]
    return [s.model_copy(update={"order": i}) for i, s in enumerate(kept)]


__all__ = [
    "CompanyNotFound", "DashboardStats", "SaveResult", "SlugTaken", "add_section",
    "company_jobs", "create_company", "dashboard_stats", "delete_job", "get_company",
    "get_job", "move_section", "remove_section", "save_branding", "save_job", "save_sections",
]
