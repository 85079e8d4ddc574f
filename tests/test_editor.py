import pytest

from careers.editor import (
    CompanyNotFound, SlugTaken, add_section, company_jobs, create_company, dashboard_stats,
    delete_job, get_company, get_job, move_section, remove_section, save_branding, save_job,
    save_sections,
)
from careers.forms import BrandingForm, CompanyForm, ContentForm, JobForm
from careers.models import ContentSection
from careers.store import RecordNotFound


def test_get_company_respects_published_flag(store):
    assert get_company(store, "stealth-labs").name == "Stealth Labs"
    with pytest.raises(CompanyNotFound):
        get_company(store, "stealth-labs", published_only=True)
    with pytest.raises(CompanyNotFound):
        get_company(store, "nobody")


def test_company_jobs_newest_first(store):
    assert [j.id for j in company_jobs(store, "company-acme")] == ["job-designer", "job-backend", "job-support"]
    assert [j.id for j in company_jobs(store, "company-acme", active_only=True)] == ["job-designer", "job-backend"]


def test_get_job_checks_company(store):
    acme = get_company(store, "acme")
    other = get_company(store, "stealth-labs")
    assert get_job(store, acme, "job-backend").title == "Backend Engineer"
    with pytest.raises(RecordNotFound):
        get_job(store, other, "job-backend")


def test_dashboard_stats(store):
    stats = dashboard_stats(store, "demo-owner")
    assert [s.company.slug for s in stats.companies] == ["stealth-labs", "acme"]
    assert stats.total_jobs == 3
    assert stats.total_active_jobs == 2
    assert stats.published_count == 1
    assert dashboard_stats(store, "someone-else").companies == []


def test_create_company_with_default_sections(store):
    company = create_company(store, "demo-owner", CompanyForm(name="New Co", slug="new-co", description="We build"))
    assert company.is_published is False
    assert [(s.title, s.order) for s in company.content_sections] == [("About Us", 0), ("Life at New Co", 1)]
    assert company.content_sections[0].content == "We build"
    assert get_company(store, "new-co").id == company.id


def test_create_company_rejects_taken_slug(store):
    with pytest.raises(SlugTaken):
        create_company(store, "demo-owner", CompanyForm(name="Acme", slug="acme"))


def test_save_branding_without_changes_skips_update(store):
    company = get_company(store, "acme")
    result = save_branding(store, company, BrandingForm.from_company(company))
    assert result.changed == {}
    assert not result.saved
    assert get_company(store, "acme").updated_at == company.updated_at


def test_save_branding_sends_only_changed_fields(store):
    company = get_company(store, "acme")
    values = {**BrandingForm.from_company(company).model_dump(), "tagline": "New tagline", "is_published": False}
    result = save_branding(store, company, BrandingForm(**values))
    assert result.changed == {"tagline": "New tagline", "is_published": False}
    saved = get_company(store, "acme")
    assert saved.tagline == "New tagline"
    assert saved.updated_at != company.updated_at


def test_save_sections_detects_reorder(store):
    company = get_company(store, "acme")
    sections = ContentForm.from_company(company).content_sections
    assert save_sections(store, company, ContentForm(content_sections=[s.model_dump() for s in sections])).changed == {}

    swapped = move_section([ContentSection(**s.model_dump()) for s in sections], 0, 1)
    result = save_sections(store, company, ContentForm(content_sections=[s.model_dump() for s in swapped]))
    assert list(result.changed) == ["content_sections"]
    assert [s.id for s in get_company(store, "acme").content_sections] == ["culture", "about"]


def test_save_new_job(store):
    result = save_job(store, "company-acme", None, JobForm(title="QA Engineer", location="Remote", salary_max="90000"))
    assert result.created
    job = get_job(store, get_company(store, "acme"), result.record["id"])
    assert job.salary_max == 90000
    assert job.salary_min is None
    assert job.is_active is True


def test_save_existing_job_sends_minimal_change_set(store):
    company = get_company(store, "acme")
    job = get_job(store, company, "job-backend")
    values = {**JobForm.from_job(job).model_dump(), "salary_min": "150000"}
    result = save_job(store, company.id, job, JobForm(**values))
    assert result.changed == {"salary_min": 150000}
    assert get_job(store, company, "job-backend").salary_min == 150000


def test_save_existing_job_without_changes(store):
    company = get_company(store, "acme")
    job = get_job(store, company, "job-designer")
    result = save_job(store, company.id, job, JobForm(**JobForm.from_job(job).model_dump()))
    assert result.changed == {}
    assert get_job(store, company, "job-designer").updated_at == job.updated_at


def test_save_existing_job_list_and_url_changes(store):
    company = get_company(store, "acme")
    job = get_job(store, company, "job-backend")
    values = {**JobForm.from_job(job).model_dump(), "benefits": ["Health insurance"], "application_url": ""}
    result = save_job(store, company.id, job, JobForm(**values))
    assert result.changed == {"benefits": ["Health insurance"], "application_url": None}


def test_delete_job(store):
    delete_job(store, "job-support")
    assert "job-support" not in [j.id for j in company_jobs(store, "company-acme")]


def _sections(*ids):
    return [ContentSection(id=i, title=i, content=i, order=n) for n, i in enumerate(ids)]


def test_move_section():
    moved = move_section(_sections("a", "b", "c"), 2, -1)
    assert [(s.id, s.order) for s in moved] == [("a", 0), ("c", 1), ("b", 2)]
    assert [s.id for s in move_section(_sections("a", "b"), 0, -1)] == ["a", "b"]


def test_remove_and_add_section():
    kept = remove_section(_sections("a", "b", "c"), 1)
    assert [(s.id, s.order) for s in kept] == [("a", 0), ("c", 1)]
    added = add_section(kept)
    assert added[-1].type == "custom"
    assert added[-1].order == 2


def test_save_existing_job_from_browser_form_without_changes(store):
    store.update("jobs", "job-designer", {"description": "Line one\nLine two"})
    company = get_company(store, "acme")
    job = get_job(store, company, "job-designer")
    submitted = {**JobForm.from_job(job).model_dump(), "description": "Line one\r\nLine two", "is_active": "on",
                 "responsibilities": "Design operator dashboards", "qualifications": "", "benefits": ""}
    result = save_job(store, company.id, job, JobForm.from_form_data(submitted))
    assert result.changed == {}
