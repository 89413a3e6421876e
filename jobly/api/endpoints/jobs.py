import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import CurrentUser, get_admin_user
from jobly.crud import job as job_crud
from jobly.schemas.job import JobCreateRequest, JobFilter, JobResponse, JobUpdateRequest

router = APIRouter(prefix="/jobs", tags=["Jobs"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=JobResponse)
def create_job(
    request: JobCreateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Create a job posting for an existing company.

    Authorization required: admin
    """
    job = job_crud.create(db, request)
    logger.info(f"Admin {admin_user.username} created job {job['id']}")

    return job


@router.get("/", response_model=List[JobResponse])
def list_jobs(
    title: Optional[str] = None,
    min_salary: Optional[int] = Query(None, alias="minSalary", ge=0),
    has_equity: Optional[bool] = Query(None, alias="hasEquity"),
    company_handle: Optional[str] = Query(None, alias="companyHandle"),
    db: Session = Depends(get_db)
):
    """
    List jobs ordered by title.

    Optional filters:
    - title: case-insensitive, partial match
    - minSalary
    - hasEquity: when true, only jobs with non-zero equity
    - companyHandle: case-insensitive, partial match

    Authorization required: none
    """
    filters = None
    if any(value is not None for value in (title, min_salary, has_equity, company_handle)):
        filters = JobFilter(
            title=title,
            min_salary=min_salary,
            has_equity=has_equity,
            company_handle=company_handle,
        )

    return job_crud.find_all(db, filters)


@router.get("/{job_id}", response_model=JobResponse)
def get_job(job_id: int, db: Session = Depends(get_db)):
    """
    Retrieve a job by ID.

    Authorization required: none
    """
    return job_crud.get(db, job_id)


@router.patch("/{job_id}", response_model=JobResponse)
def update_job(
    job_id: int,
    request: JobUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Partially update a job.

    Fields can be: { title, salary, equity }

    Authorization required: admin
    """
    return job_crud.update(db, job_id, request)


@router.delete("/{job_id}")
def delete_job(
    job_id: int,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Delete a job by ID.

    Authorization required: admin
    """
    job_crud.remove(db, job_id)
    logger.info(f"Admin {admin_user.username} deleted job {job_id}")

    return {"deleted": job_id}
