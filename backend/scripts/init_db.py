"""
Initialize database tables and seed sample job postings
"""
import sys
from datetime import timedelta
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session
from jobboard.core.config import settings
from jobboard.core.database import Database
from jobboard.core.dates import utcnow
from jobboard.core.logging_config import configure_logging
from jobboard.models.job import Job
import structlog

logger = structlog.get_logger()

SAMPLE_JOBS = [
    {
        "title": "Full Stack Developer",
        "company": "Tech Corp",
        "location": "New York",
        "employment_type": "FULL_TIME",
        "salary": "$80,000 - $120,000",
        "description": "We are looking for a Full Stack Developer with experience in React and Node.js.",
        "requirements": "3+ years of experience with React, Node.js, and TypeScript.",
        "experience_level": "MID",
        "skills": ["React", "Node.js", "TypeScript", "MongoDB"],
        "company_id": "tech-corp-001",
    },
    {
        "title": "Frontend Engineer",
        "company": "Startup Inc",
        "location": "San Francisco",
        "employment_type": "FULL_TIME",
        "salary": "$90,000 - $130,000",
        "description": "Join our team as a Frontend Engineer working with modern JavaScript frameworks.",
        "requirements": "Experience with React, Vue.js, or Angular. Knowledge of CSS and responsive design.",
        "experience_level": "SENIOR",
        "skills": ["React", "Vue.js", "CSS", "JavaScript"],
        "company_id": "startup-inc-001",
    },
    {
        "title": "Backend Developer",
        "company": "Enterprise Solutions",
        "location": "Remote",
        "employment_type": "CONTRACT",
        "salary": "$70,000 - $100,000",
        "description": "Backend developer needed for API development and database management.",
        "requirements": "Experience with Node.js, Express, and PostgreSQL.",
        "experience_level": "MID",
        "skills": ["Node.js", "Express", "PostgreSQL", "REST APIs"],
        "company_id": "enterprise-solutions-001",
    },
    {
        "title": "Part-time Web Developer",
        "company": "Small Business Inc",
        "location": "Chicago",
        "employment_type": "PART_TIME",
        "salary": "$40,000 - $60,000",
        "description": "Part-time web developer needed for website maintenance and updates.",
        "requirements": "Experience with HTML, CSS, JavaScript, and basic PHP.",
        "experience_level": "ENTRY",
        "skills": ["HTML", "CSS", "JavaScript", "PHP"],
        "company_id": "small-business-inc-001",
    },
    {
        "title": "Software Engineering Intern",
        "company": "Tech Startup",
        "location": "Austin",
        "employment_type": "INTERNSHIP",
        "salary": "$25,000 - $35,000",
        "description": "Internship opportunity for software engineering students.",
        "requirements": "Currently enrolled in Computer Science or related field.",
        "experience_level": "ENTRY",
        "skills": ["Java", "Python", "Git", "Agile"],
        "company_id": "tech-startup-001",
    },
]


def seed_sample_jobs(db: Session) -> int:
    """Insert the sample jobs that are not there yet (matched by title and company)"""
    created = 0
    now = utcnow()
    for job_data in SAMPLE_JOBS:
        existing = (
            db.query(Job)
            .filter(Job.title == job_data["title"], Job.company == job_data["company"])
            .first()
        )
        if existing:
            logger.info("sample_job_exists", title=job_data["title"])
            continue

        db.add(
            Job(
                **job_data,
                active=True,
                posted_date=now,
                expiry_date=now + timedelta(days=settings.JOB_EXPIRY_DAYS),
                applicants=[],
            )
        )
        created += 1
        logger.info("sample_job_created", title=job_data["title"])

    db.commit()
    return created


def main():
    """Main initialization function"""
    configure_logging()
    logger.info("initializing_database")

    database = Database.from_settings()
    database.create_all()

    db: Session = database.session()
    try:
        created = seed_sample_jobs(db)
        logger.info("database_initialization_complete", sample_jobs_created=created)
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        db.rollback()
        raise
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
