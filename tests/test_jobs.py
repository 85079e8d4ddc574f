from careers.jobs import ALL, FilterCriteria, derive_facets, filter_jobs, summarize
from careers.models import Job

from conftest import make_job


def ids(jobs):
    return [j.id for j in jobs]


def test_facets_are_sorted_and_distinct(jobs):
    facets = derive_facets(jobs)
    assert facets.locations == ["Austin", "Berlin", "Remote"]
    assert facets.job_types == ["Contract", "Full-time", "Part-time"]


def test_facets_are_deterministic(jobs):
    assert derive_facets(jobs) == derive_facets(list(jobs))
    assert derive_facets(reversed(jobs)) == derive_facets(jobs)


def test_facets_use_code_point_order():
    facets = derive_facets([make_job(location="austin"), make_job(location="Zurich"), make_job(location="Émile")])
    assert facets.locations == ["Zurich", "austin", "Émile"]


def test_facets_skip_blank_values():
    facets = derive_facets([make_job(location="", job_type=""), make_job(location="Remote")])
    assert facets.locations == ["Remote"]
    assert facets.job_types == ["Full-time"]


def test_facets_of_empty_collection():
    facets = derive_facets([])
    assert facets.locations == []
    assert facets.job_types == []


def test_facets_include_inactive_jobs(jobs):
    # the designer posting is inactive but its values are still present
    assert "Contract" in derive_facets(jobs[1:2]).job_types


def test_no_op_criteria_keep_active_jobs_in_order(jobs):
    result = filter_jobs(jobs, FilterCriteria())
    assert ids(result) == [j.id for j in jobs if j.is_active]


def test_scenario_inactive_job_hidden():
    jobs = [
        make_job(id="1", title="Backend Engineer", location="Austin", job_type="Full-time", is_active=True),
        make_job(id="2", title="Designer", location="Remote", job_type="Contract", is_active=False),
    ]
    assert ids(filter_jobs(jobs, FilterCriteria(search_text="", location="all", job_type="all"))) == ["1"]


def test_scenario_text_match_still_needs_active_flag():
    jobs = [
        make_job(id="1", title="Backend Engineer", location="Austin", job_type="Full-time", is_active=True),
        make_job(id="2", title="Designer", location="Remote", job_type="Contract", is_active=False),
    ]
    assert filter_jobs(jobs, FilterCriteria(search_text="design")) == []


def test_search_is_case_insensitive_on_title(jobs):
    assert ids(filter_jobs(jobs, FilterCriteria(search_text="ENGINEER"))) == ["1", "3", "5"]


def test_search_matches_department(jobs):
    assert ids(filter_jobs(jobs, FilterCriteria(search_text="engineering"))) == ["1", "5"]


def test_search_skips_missing_department(jobs):
    assert ids(filter_jobs(jobs, FilterCriteria(search_text="manager"))) == ["4"]
    assert filter_jobs(jobs, FilterCriteria(search_text="none")) == []


def test_location_and_job_type_are_exact(jobs):
    criteria = FilterCriteria(location="Austin", job_type="Contract")
    assert ids(filter_jobs(jobs, criteria)) == ["5"]
    assert filter_jobs(jobs, FilterCriteria(location="austin")) == []


def test_unknown_facet_value_matches_nothing(jobs):
    assert filter_jobs(jobs, FilterCriteria(location="Mars")) == []


def test_every_result_satisfies_all_predicates(jobs):
    criteria = FilterCriteria(search_text="e", location="Remote", job_type=ALL)
    result = filter_jobs(jobs, criteria)
    for job in result:
        assert "e" in job.title.lower() or "e" in (job.department or "").lower()
        assert job.location == "Remote"
        assert job.is_active
    expected = [j for j in jobs if j.location == "Remote" and j.is_active]
    assert result == expected


def test_filter_does_not_mutate_input(jobs):
    before = list(jobs)
    filter_jobs(jobs, FilterCriteria(search_text="x"))
    assert jobs == before


def test_filter_accepts_any_iterable(jobs):
    assert ids(filter_jobs(iter(jobs), FilterCriteria(job_type="Full-time"))) == ["1", "3"]


def test_unset_active_flag_counts_as_active():
    job = Job.model_validate({"id": "9", "title": "Analyst", "location": "Remote", "job_type": "Full-time", "is_active": None})
    assert job.is_active is True
    job = Job.model_validate({"id": "9", "title": "Analyst", "location": "Remote", "job_type": "Full-time"})
    assert filter_jobs([job], FilterCriteria()) == [job]


def test_has_active_filters():
    assert not FilterCriteria().has_active_filters
    assert FilterCriteria(search_text="a").has_active_filters
    assert FilterCriteria(location="Remote").has_active_filters
    assert FilterCriteria(job_type="Contract").has_active_filters


def test_summarize_reports_counts(jobs):
    summary = summarize(jobs, FilterCriteria(location="Remote"))
    assert ids(summary.jobs) == ["3"]
    assert summary.filtered_count == 1
    assert summary.total_count == 5
    assert summary.has_active_filters
    assert summary.facets.locations == ["Austin", "Berlin", "Remote"]
