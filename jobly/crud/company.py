"""
CRUD operations for companies.

Filtered listings and partial updates are built with the SQL helpers in
`jobly.crud.sql`; every caller value is sent as a bound parameter.
"""

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from jobly.core.exceptions import ConflictError, NotFoundError, ValidationError
from jobly.crud import job as job_crud
from jobly.crud.sql import FieldMap, PredicateBuilder, at_least, at_most, contains, execute, sql_for_partial_update
from jobly.schemas.company import CompanyCreateRequest, CompanyFilter, CompanyUpdateRequest

logger = logging.getLogger(__name__)

FIELD_MAP = FieldMap({
    "numEmployees": "num_employees",
    "logoUrl": "logo_url",
})

FILTERS = PredicateBuilder([
    contains("name", "name"),
    at_least("minEmployees", "num_employees"),
    at_most("maxEmployees", "num_employees"),
])

_COLUMNS = 'handle, name, description, num_employees AS "numEmployees", logo_url AS "logoUrl"'


def create(db: Session, company_data: CompanyCreateRequest) -> Dict[str, Any]:
    """
    Create a new company.

    Returns:
        { handle, name, description, numEmployees, logoUrl }

    Raises:
        ConflictError: If a company with the same handle or name exists
    """
    duplicate = execute(
        db,
        """SELECT handle
           FROM companies
           WHERE handle = $1 OR name = $2""",
        [company_data.handle, company_data.name],
    ).first()

    if duplicate is not None:
        if duplicate.handle == company_data.handle:
            raise ConflictError(f"Duplicate company: {company_data.handle}")
        raise ConflictError(f"Duplicate company name: {company_data.name}")

    result = execute(
        db,
        f"""INSERT INTO companies (handle, name, description, num_employees, logo_url)
            VALUES ($1, $2, $3, $4, $5)
            RETURNING {_COLUMNS}""",
        [
            company_data.handle,
            company_data.name,
            company_data.description,
            company_data.num_employees,
            company_data.logo_url,
        ],
    )
    company = dict(result.one()._mapping)
    db.commit()

    logger.info(f"Created company {company['handle']}")
    return company


def find_all(db: Session, filters: Optional[CompanyFilter] = None) -> List[Dict[str, Any]]:
    """
    List companies ordered by name, optionally filtered by:
    - name (case-insensitive, partial match)
    - minEmployees
    - maxEmployees

    Raises:
        ValidationError: If minEmployees is greater than maxEmployees
    """
    criteria = filters.to_criteria() if filters is not None else {}

    min_employees = criteria.get("minEmployees")
    max_employees = criteria.get("maxEmployees")
    if min_employees is not None and max_employees is not None and min_employees > max_employees:
        raise ValidationError("minEmployees cannot be greater than maxEmployees")

    where_clause, where_values = "", ()
    if criteria:
        where_clause, where_values = FILTERS.build_where(criteria)

    result = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM companies
            {where_clause}
            ORDER BY name""",
        where_values,
    )
    return [dict(row._mapping) for row in result]


def get(db: Session, handle: str) -> Dict[str, Any]:
    """
    Retrieve a company by handle, with the jobs it has posted.

    Returns:
        { handle, name, description, numEmployees, logoUrl, jobs }
        where jobs is [{ id, title, salary, equity, companyHandle }, ...]

    Raises:
        NotFoundError: If there is no such company
    """
    row = execute(
        db,
        f"""SELECT {_COLUMNS}
            FROM companies
            WHERE handle = $1""",
        [handle],
    ).first()

    if row is None:
        raise NotFoundError(f"No company: {handle}")

    company = dict(row._mapping)
    company["jobs"] = job_crud.find_by_company(db, handle)
    return company


def update(db: Session, handle: str, company_data: CompanyUpdateRequest) -> Dict[str, Any]:
    """
    Partially update a company: only fields set on `company_data` are changed.

    Raises:
        ValidationError: If no fields were set
        NotFoundError: If there is no such company
        ConflictError: If the new name belongs to another company
    """
    data = company_data.model_dump(exclude_unset=True, by_alias=True, mode="json")
    set_cols, values = sql_for_partial_update(data, FIELD_MAP)

    if "name" in data:
        taken = execute(
            db,
            """SELECT handle
               FROM companies
               WHERE name = $1 AND handle <> $2""",
            [data["name"], handle],
        ).first()

        if taken is not None:
            raise ConflictError(f"Duplicate company name: {data['name']}")

    handle_idx = len(values) + 1

    row = execute(
        db,
        f"""UPDATE companies
            SET {set_cols}
            WHERE handle = ${handle_idx}
            RETURNING {_COLUMNS}""",
        [*values, handle],
    ).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Updated company {handle}: {set_cols}")
    return dict(row._mapping)


def remove(db: Session, handle: str) -> None:
    """
    Delete a company (and, through the foreign key, its jobs).

    Raises:
        NotFoundError: If there is no such company
    """
    row = execute(
        db,
        """DELETE
           FROM companies
           WHERE handle = $1
           RETURNING handle""",
        [handle],
    ).first()

    if row is None:
        db.rollback()
        raise NotFoundError(f"No company: {handle}")

    db.commit()
    logger.info(f"Deleted company {handle}")
