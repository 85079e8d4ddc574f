from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field

from careers.models import Job

ALL = "all"


class FilterCriteria(BaseModel):
    search_text: str = ""
    location: str = ALL
    job_type: str = ALL

    @property
    def has_active_filters(self) -> bool:
        return self.search_text != "" or self.location != ALL or self.job_type != ALL


class Facets(BaseModel):
    locations: list[str] = Field(default_factory=list)
    job_types: list[str] = Field(default_factory=list)


class FilterSummary(BaseModel):
    jobs: list[Job]
    facets: Facets
    criteria: FilterCriteria
    filtered_count: int
    total_count: int

    @property
    def has_active_filters(self) -> bool:
        return self.criteria.has_active_filters


def _distinct(values: Iterable[Optional[str]]) -> list[str]:
    # blank values are missing data, not a category
    return sorted({v for v in values if v})


def derive_facets(jobs: Iterable[Job]) -> Facets:
    """Distinct locations and job types present in ``jobs``, in code point order."""
    jobs = list(jobs)
    return Facets(
        locations=_distinct(j.location for j in jobs),
        job_types=_distinct(j.job_type for j in jobs),
    )


def _matches_text(job: Job, needle: str) -> bool:
    if not needle:
        return True
    if needle in job.title.lower():
        return True
    return job.department is not None and needle in job.department.lower()


def filter_jobs(jobs: Iterable[Job], criteria: FilterCriteria) -> list[Job]:
    """Jobs satisfying every criterion, in their original order.

    ``"all"`` disables the location or job type constraint, an empty search
    text disables the text match. Jobs flagged inactive never pass.
    """
    needle = criteria.search_text.lower()
    return [
        j for j in jobs
        if _matches_text(j, needle)
        and (criteria.location == ALL or j.location == criteria.location)
        and (criteria.job_type == ALL or j.job_type == criteria.job_type)
        and j.is_active is not False
    ]


def summarize(jobs: Sequence[Job], criteria: FilterCriteria) -> FilterSummary:
    subset = filter_jobs(jobs, criteria)
    return FilterSummary(
        jobs=subset,
        facets=derive_facets(jobs),
        criteria=criteria,
        filtered_count=len(subset),
        total_count=len(jobs),
    )


__all__ = ["ALL", "Facets", "FilterCriteria", "FilterSummary", "derive_facets", "filter_jobs", "summarize"]
