"""Showcase company served at /demo/{slug}/careers without touching the store."""

from careers.models import Company, ContentSection, Job
from careers.store import utcnow

DEMO_COMPANY_ID = "demo-company-id"


def demo_company(slug: str) -> Company:
    if slug == "techcorp":
        name = "TechCorp Inc."
    else:
        name = slug[:1].upper() + slug[1:].replace("-", " ")
    now = utcnow()
    return Company(
        id=DEMO_COMPANY_ID,
        user_id="demo-user-id",
        slug=slug,
        name=name,
        tagline="Building the future of technology, one innovation at a time",
        description=(
            "We are a technology company creating products that change how "
            "teams work. Our mission is to empower people through great software."
        ),
        content_sections=[
            ContentSection(
                id="about", type="about", title="About Us", order=0,
                content="Founded in 2015, we have grown from a small startup to a team of 500 across 10 countries.",
            ),
            ContentSection(
                id="culture", type="culture", title="Our Culture", order=1,
                content="We value curiosity, collaboration and continuous learning.",
            ),
            ContentSection(
                id="benefits", type="benefits", title="Benefits & Perks", order=2,
                content="Competitive salary, equity, remote-first culture, health insurance and a learning budget.",
            ),
        ],
        is_published=True,
        created_at=now,
        updated_at=now,
    )


_JOBS = [
    ("demo-job-1", "Senior Frontend Engineer", "Engineering", "San Francisco, CA", "hybrid", 150000, 200000,
     ["Build and maintain the web application", "Mentor other engineers"],
     ["5+ years of frontend experience", "Strong TypeScript skills"]),
    ("demo-job-2", "Product Designer", "Design", "New York, NY", "remote", 120000, 160000,
     ["Own the design of core product flows", "Run user research sessions"],
     ["4+ years of product design experience"]),
    ("demo-job-3", "Backend Engineer", "Engineering", "Austin, TX", "onsite", 140000, 180000,
     ["Design APIs and data models", "Keep services fast and reliable"],
     ["4+ years backend experience"]),
    ("demo-job-4", "DevOps Engineer", "Engineering", "Remote", "remote", 130000, 170000,
     ["Run our cloud infrastructure", "Improve build and deploy pipelines"],
     ["3+ years DevOps experience"]),
    ("demo-job-5", "Marketing Manager", "Marketing", "Los Angeles, CA", "hybrid", 100000, 140000,
     ["Plan and run campaigns", "Grow the brand"],
     ["5+ years marketing experience"]),
]


def demo_jobs(company_id: str = DEMO_COMPANY_ID) -> list[Job]:
    now = utcnow()
    return [
        Job(
            id=job_id,
            company_id=company_id,
            title=title,
            department=department,
            location=location,
            location_type=location_type,
            job_type="Full-time",
            salary_min=salary_min,
            salary_max=salary_max,
            responsibilities=responsibilities,
            qualifications=qualifications,
            benefits=["Competitive salary", "Health insurance", "Learning budget"],
            description=f"Join our {department.lower()} team as a {title}.",
            created_at=now,
            updated_at=now,
        )
        for (job_id, title, department, location, location_type, salary_min, salary_max,
             responsibilities, qualifications) in _JOBS
    ]
