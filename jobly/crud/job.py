"""
CRUD operations for jobs.

Filtered listings and partial updates are built with the SQL helpers in
`jobly.crud.sql`; every caller value is sent as a bound parameter.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import Numeric
from sqlalchemy.orm import Session

from jobly.core.exceptions import NotFoundError
from jobly.crud.sql import FieldMap, PredicateBuilder, at_least, contains, execute, flag, sql_for_partial_update
from jobly.schemas.job import JobCreateRequest, JobFilter, JobUpdateRequest

logger = logging.getLogger(__name__)

# title, salary and equity already match their column names
FIELD_MAP = FieldMap()

FILTERS = PredicateBuilder([
    at_least("minSalary", "salary"),
    flag("hasEquity", "equity > 0"),
    contains("title", "title"),
    contains("companyHandle", "company_handle"),
])

_COLUMNS = 'id, title, salary, equity, company_handle AS "companyHandle"'

# NUMERIC comes back as Decimal whatever the driver
_TYPES = {"equity": Numeric(4, 3)}


def create(db: Session, job_data: JobCreateRequest) -> Dict[str, Any]:
    """
    Create a new job. The company handle is taken as given.

    Returns:
        { id, title, salary, equity, companyHandle }
    """
    data = job_data.model_dump(mode="json")
    result = execute(
        db,
        f"""INSERT INTO jobs (title, salary, equity, company_handle)
            VALUES ($1, $2, $3, $4)
            RETURNING {_COLUMNS}""",
        [data["title"], data["salary"], data["equity"], data["company_handle"]],
        columns=_TYPES,
    )
    job = dict(result.one()._mapping)
    db.commit()

    logger.info(f"Created job {job['id']}: {job['title']} ({job['companyHandle']})")
    return job


def find_all(db: Session, filters: Optional[JobFilter] = None) -> List[Dict[str, Any]]:
    """
    List jobs ordered by title, optionally filtered by:
    - minSalary
    - hasEquity (only jobs with equity > 0 when true)
    - title (case-insensitive, partial match)
    - companyHandle (case-insensitive, partial match)

    Returns:
        [{ id, title, salary, equity, companyHandle }, ...]
    """
    criteria = filters.to_criteria() if filters is not None else {}

    where_clause, where_values = "", ()
    if criteria:
        where_clause, where_values = FILTERS.build_where(criteria)

    result = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM jobs
            {where_clause}
            ORDER BY title""",
        where_values,
        columns=_TYPES,
    )
    return [dict(row._mapping) for row in result]


def find_by_company(db: Session, handle: str) -> List[Dict[str, Any]]:
    """Jobs posted by exactly this company, ordered by id."""
    result = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM jobs
            WHERE company_handle = $1
            ORDER BY id""",
        [handle],
        columns=_TYPES,
    )
    return [dict(row._mapping) for row in result]


def get(db: Session, job_id: int) -> Dict[str, Any]:
    """
    Retrieve a job by its ID.

    Raises:
        NotFoundError: If there is no such job
    """
    row = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM jobs
            WHERE id = $1""",
        [job_id],
        columns=_TYPES,
    ).first()

    if row is None:
        raise NotFoundError(f"No job: {job_id}")

    return dict(row._mapping)


def update(db: Session, job_id: int, job_data: JobUpdateRequest) -> Dict[str, Any]:
    """
    Partially update a job: only fields set on `job_data` are changed.

    Raises:
        ValidationError: If no fields were set
        NotFoundError: If there is no such job
    """
    set_cols, values = sql_for_partial_update(
        job_data.model_dump(exclude_unset=True, by_alias=True, mode="json"),
        FIELD_MAP,
    )
    id_idx = len(values) + 1

    row = execute(
        db,
        f"""UPDATE jobs
            SET {set_cols}
            WHERE id = ${id_idx}
            RETURNING {_COLUMNS}""",
        [*values, job_id],
        columns=_TYPES,
    ).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Updated job {job_id}: {set_cols}")
    return dict(row._mapping)


def remove(db: Session, job_id: int) -> None:
    """
    Delete a job by ID.

    Raises:
        NotFoundError: If there is no such job
    """
    row = execute(
        db,
        """DELETE
           FROM jobs
           WHERE id = $1
           RETURNING id""",
        [job_id],
    ).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No job: {job_id}")

    db.commit()
    logger.info(f"Deleted job {job_id}")
