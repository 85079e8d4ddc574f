from fastapi import Depends, FastAPI, Request, Response, Form, HTTPException
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, StreamingResponse
from fastapi.staticfiles import StaticFiles
from jinja2 import Environment, FileSystemLoader, select_autoescape
from pydantic import ValidationError
from typing import Optional
from contextlib import suppress
import asyncio
import json
from careers import config
from careers.csrf import CSRFMiddleware
from careers.demo import demo_company, demo_jobs
from careers.editor import (
    CompanyNotFound, SlugTaken, add_section, company_jobs, create_company, dashboard_stats,
    delete_job, get_company, get_job, move_section, remove_section, save_branding, save_job,
    save_sections,
)
from careers.forms import (
    BrandingForm, CompanyForm, ContentForm, JOB_TYPES, JobForm, form_errors, sections_from_form_data,
)
from careers.jobs import ALL, FilterCriteria, summarize
from careers.logger import get_logger
from careers.models import Company, Job
from careers.pages import (
    detail_sections, embed_video_url, page_metadata, positions_label, salary_label, sorted_sections,
)
from careers.sessions import createSession, flash, getSession, lifespan, pop_flashes, sessions, touch_session, updateFilter
from careers.store import RecordNotFound, RecordStore

logger = get_logger(__name__)

EDITOR_TABS = ("branding", "content", "jobs")

app = FastAPI(lifespan=lifespan)

app.mount("/static", StaticFiles(directory=config.STATIC_DIR), name="static")
app.add_middleware(CSRFMiddleware)

templates = Environment(
    loader=FileSystemLoader(config.TEMPLATES_DIR),
    autoescape=select_autoescape(["html", "xml"])
)
templates.globals.update(
    salary_label=salary_label,
    positions_label=positions_label,
    detail_sections=detail_sections,
    job_types=JOB_TYPES,
)

_store = RecordStore.from_file(config.DATA_FILE)


def get_store() -> RecordStore:
    return _store


def ensure_session(request: Request) -> str:
    session_id = request.cookies.get("session_id")
    if not session_id or session_id not in sessions:
        return createSession()
    touch_session(session_id=session_id)
    return session_id


def render(template_name: str, session_id: str, status_code: int = 200, **context) -> HTMLResponse:
    session = getSession(session_id=session_id)
    html = templates.get_template(template_name).render(
        csrfToken=session.csrfToken,
        flashes=pop_flashes(session_id=session_id),
        **context
    )
    response = HTMLResponse(content=html, status_code=status_code)
    response.set_cookie(
        key="session_id",
        value=session_id,
        httponly=True,
        samesite="strict",
        max_age=config.SESSION_TTL
    )
    return response


def redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def criteria_from_query(search: Optional[str], location: Optional[str], job_type: Optional[str]) -> FilterCriteria:
    return FilterCriteria(
        search_text=str(search or "").strip(),
        location=str(location or ALL),
        job_type=str(job_type or ALL),
    )


def careers_page(
    request: Request, company: Company, jobs: list[Job], criteria: FilterCriteria, *,
    live: bool = True, preview: bool = False, demo: bool = False
) -> HTMLResponse:
    session_id = ensure_session(request)
    if live:
        updateFilter(session_id=session_id, slug=company.slug, filter=criteria)
    return render(
        "careers.html",
        session_id,
        company=company,
        sections=sorted_sections(company),
        video_url=embed_video_url(company.culture_video_url),
        meta=page_metadata(company),
        summary=summarize(jobs, criteria),
        live=live,
        preview=preview,
        demo=demo,
    )


@app.exception_handler(CompanyNotFound)
@app.exception_handler(RecordNotFound)
async def not_found(request: Request, exc: LookupError):
    logger.info(f"Not found: {request.url.path} ({exc})")
    html = templates.get_template("not_found.html").render(meta=page_metadata(None))
    return HTMLResponse(content=html, status_code=404)


@app.get("/", response_class=HTMLResponse)
async def home(request: Request):
    return render("index.html", ensure_session(request))


# --- Public careers pages ---

@app.get("/{slug}/careers", response_class=HTMLResponse)
async def careers(
    request: Request,
    slug: str,
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[str] = None,
    store: RecordStore = Depends(get_store),
):
    company = get_company(store, slug, published_only=True)
    jobs = company_jobs(store, company.id, active_only=True)
    return careers_page(request, company, jobs, criteria_from_query(search, location, job_type))


@app.get("/{slug}/careers/jobs/{job_id}", response_class=HTMLResponse)
async def job_detail(request: Request, slug: str, job_id: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug, published_only=True)
    job = get_job(store, company, job_id)
    if job.is_active is False:
        raise RecordNotFound("jobs", job_id)
    return render("job_detail.html", ensure_session(request), company=company, job=job,
                  meta=page_metadata(company))


@app.post("/{slug}/careers/search")
async def search(
    request: Request,
    slug: str,
    q: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    job_type: Optional[str] = Form(None),
    store: RecordStore = Depends(get_store),
):
    content_type = request.headers.get("content-type", "")
    session_id = request.cookies.get("session_id")
    if content_type.startswith("application/json"):
        data = await request.json()
        if not isinstance(data, dict):
            return JSONResponse({"error": "Expected a JSON object"}, status_code=422)
        criteria = criteria_from_query(data.get("q"), data.get("location"), data.get("job_type"))
        updateFilter(session_id=session_id, slug=slug, filter=criteria)
        return Response(status_code=204)
    elif content_type.startswith("application/x-www-form-urlencoded"):
        criteria = criteria_from_query(q, location, job_type)
    else:
        return JSONResponse({"error": "Unsupported Content-Type"}, status_code=415)

    company = get_company(store, slug, published_only=True)
    jobs = company_jobs(store, company.id, active_only=True)
    return careers_page(request, company, jobs, criteria)


@app.get("/events")
async def events(request: Request, store: RecordStore = Depends(get_store)):
    session_id = request.cookies.get("session_id")
    if not session_id:
        raise HTTPException(status_code=400, detail="Missing session ID")
    touch_session(session_id=session_id)
    session = getSession(session_id=session_id)
    queue = session.stream

    async def keep_alive():
        while True:
            await asyncio.sleep(config.SSE_PING_INTERVAL)
            if await request.is_disconnected():
                return
            session.stream.put_nowait("event: ping\ndata: ping\n\n")

    def push_results():
        try:
            company = get_company(store, session.slug, published_only=True)
        except CompanyNotFound:
            return
        summary = summarize(company_jobs(store, company.id, active_only=True), session.filter)
        template = templates.get_template("results.html")
        payload = {
            "html": template.render(company=company, summary=summary),
            "count": summary.filtered_count,
            "total": summary.total_count,
            "hasActiveFilters": summary.has_active_filters,
        }
        session.stream.put_nowait(f"event: results\ndata: {json.dumps(payload)}\n\n")

    async def event_stream():
        yield "retry: 10000\nevent: ping\ndata: connected\n\n"

        try:
            while True:
                message = await queue.get()
                yield message
                if await request.is_disconnected():
                    break

        finally:
            session.bus.off("update", push_results)
            ping_task.cancel()
            with suppress(asyncio.CancelledError):
                await ping_task

    session.bus.on("update", push_results)
    ping_task = asyncio.create_task(keep_alive())

    return StreamingResponse(event_stream(), media_type="text/event-stream")


@app.get("/demo/{slug}/careers", response_class=HTMLResponse)
async def demo(
    request: Request,
    slug: str,
    search: Optional[str] = None,
    location: Optional[str] = None,
    job_type: Optional[str] = None,
):
    company = demo_company(slug)
    criteria = criteria_from_query(search, location, job_type)
    return careers_page(request, company, demo_jobs(company.id), criteria, live=False, demo=True)


# --- Dashboard ---

@app.get("/dashboard", response_class=HTMLResponse)
async def dashboard(request: Request, store: RecordStore = Depends(get_store)):
    return render("dashboard.html", ensure_session(request), stats=dashboard_stats(store, config.OWNER_ID))


@app.get("/dashboard/create-company", response_class=HTMLResponse)
async def create_company_form(request: Request):
    return render("create_company.html", ensure_session(request), values={}, errors={})


@app.post("/dashboard/create-company", response_class=HTMLResponse)
async def create_company_submit(request: Request, store: RecordStore = Depends(get_store)):
    session_id = ensure_session(request)
    data = await request.form()
    try:
        form = CompanyForm.from_form_data(data)
        company = create_company(store, config.OWNER_ID, form)
    except ValidationError as exc:
        return render("create_company.html", session_id, 422, values=dict(data), errors=form_errors(exc))
    except SlugTaken as exc:
        return render("create_company.html", session_id, 409, values=dict(data), errors={"slug": str(exc)})
    return redirect(f"/dashboard/{company.slug}/edit")


def editor_page(
    request: Request, store: RecordStore, company: Company, tab: str, *,
    status_code: int = 200, branding: Optional[dict] = None, sections=None, errors: Optional[dict] = None
) -> HTMLResponse:
    return render(
        "editor.html",
        ensure_session(request),
        status_code,
        company=company,
        tab=tab if tab in EDITOR_TABS else EDITOR_TABS[0],
        tabs=EDITOR_TABS,
        branding=branding if branding is not None else BrandingForm.from_company(company).model_dump(),
        sections=sections if sections is not None else sorted_sections(company),
        jobs=company_jobs(store, company.id),
        errors=errors or {},
    )


@app.get("/dashboard/{slug}/edit", response_class=HTMLResponse)
async def edit_company(request: Request, slug: str, tab: str = "branding", store: RecordStore = Depends(get_store)):
    return editor_page(request, store, get_company(store, slug), tab)


@app.post("/dashboard/{slug}/branding", response_class=HTMLResponse)
async def update_branding(request: Request, slug: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    data = await request.form()
    try:
        form = BrandingForm.from_form_data(data)
    except ValidationError as exc:
        return editor_page(request, store, company, "branding", status_code=422,
                           branding=dict(data), errors=form_errors(exc))
    result = save_branding(store, company, form)
    session_id = ensure_session(request)
    if result.saved:
        flash(session_id=session_id, message="Changes saved successfully!", level="success")
    else:
        flash(session_id=session_id, message="No changes to save")
    return redirect(f"/dashboard/{slug}/edit?tab=branding")


@app.post("/dashboard/{slug}/content", response_class=HTMLResponse)
async def update_content(request: Request, slug: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    data = await request.form()
    action = str(data.get("action", "save"))
    try:
        sections = sections_from_form_data(data)
    except ValidationError as exc:
        return editor_page(request, store, company, "content", status_code=422, errors=form_errors(exc))

    if action != "save":
        name, _, index = action.partition("-")
        try:
            if name == "add":
                sections = add_section(sections)
            elif name == "up":
                sections = move_section(sections, int(index), -1)
            elif name == "down":
                sections = move_section(sections, int(index), 1)
            elif name == "remove":
                sections = remove_section(sections, int(index))
            else:
                raise HTTPException(status_code=400, detail=f"Unknown action {action!r}")
        except ValueError:
            raise HTTPException(status_code=400, detail=f"Invalid action {action!r}")
        return editor_page(request, store, company, "content", sections=sections)

    try:
        form = ContentForm.from_form_data(data)
    except ValidationError as exc:
        return editor_page(request, store, company, "content", status_code=422,
                           sections=sections, errors=form_errors(exc))

    result = save_sections(store, company, form)
    session_id = ensure_session(request)
    if result.saved:
        flash(session_id=session_id, message="Sections saved successfully!", level="success")
    else:
        flash(session_id=session_id, message="No changes to save")
    return redirect(f"/dashboard/{slug}/edit?tab=content")


def job_form_page(request: Request, company: Company, job: Optional[Job], values: dict, errors=None, status_code=200):
    return render("job_form.html", ensure_session(request), status_code,
                  company=company, job=job, values=values, errors=errors or {})


@app.get("/dashboard/{slug}/jobs/new", response_class=HTMLResponse)
async def new_job(request: Request, slug: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    return job_form_page(request, company, None, JobForm.from_job(None).model_dump())


@app.get("/dashboard/{slug}/jobs/{job_id}/edit", response_class=HTMLResponse)
async def edit_job(request: Request, slug: str, job_id: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    job = get_job(store, company, job_id)
    return job_form_page(request, company, job, JobForm.from_job(job).model_dump())


async def _submit_job(request: Request, store: RecordStore, company: Company, job: Optional[Job]):
    data = await request.form()
    try:
        form = JobForm.from_form_data(data)
    except ValidationError as exc:
        return job_form_page(request, company, job, dict(data), form_errors(exc), 422)
    result = save_job(store, company.id, job, form)
    session_id = ensure_session(request)
    if result.created:
        flash(session_id=session_id, message="Job created successfully!", level="success")
    elif result.saved:
        flash(session_id=session_id, message="Job updated successfully!", level="success")
    return redirect(f"/dashboard/{company.slug}/edit?tab=jobs")


@app.post("/dashboard/{slug}/jobs/new", response_class=HTMLResponse)
async def create_job(request: Request, slug: str, store: RecordStore = Depends(get_store)):
    return await _submit_job(request, store, get_company(store, slug), None)


@app.post("/dashboard/{slug}/jobs/{job_id}/edit", response_class=HTMLResponse)
async def update_job(request: Request, slug: str, job_id: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    return await _submit_job(request, store, company, get_job(store, company, job_id))


@app.post("/dashboard/{slug}/jobs/{job_id}/delete")
async def remove_job(request: Request, slug: str, job_id: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    job = get_job(store, company, job_id)
    delete_job(store, job.id)
    flash(session_id=ensure_session(request), message="Job posting deleted successfully", level="success")
    return redirect(f"/dashboard/{slug}/edit?tab=jobs")


@app.get("/dashboard/{slug}/preview", response_class=HTMLResponse)
async def preview(request: Request, slug: str, store: RecordStore = Depends(get_store)):
    company = get_company(store, slug)
    jobs = company_jobs(store, company.id)
    return careers_page(request, company, jobs, FilterCriteria(), live=False, preview=True)
