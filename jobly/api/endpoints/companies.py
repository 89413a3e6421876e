import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from jobly.core.database import get_db
from jobly.core.deps import CurrentUser, get_admin_user
from jobly.crud import company as company_crud
from jobly.schemas.company import (
    CompanyCreateRequest,
    CompanyDetailResponse,
    CompanyFilter,
    CompanyResponse,
    CompanyUpdateRequest,
)

router = APIRouter(prefix="/companies", tags=["Companies"])
logger = logging.getLogger(__name__)


@router.post("/", status_code=201, response_model=CompanyResponse)
def create_company(
    request: CompanyCreateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Create a company.

    Authorization required: admin
    """
    company = company_crud.create(db, request)
    logger.info(f"Admin {admin_user.username} created company {company['handle']}")

    return company


@router.get("/", response_model=List[CompanyResponse])
def list_companies(
    name: Optional[str] = None,
    min_employees: Optional[int] = Query(None, alias="minEmployees", ge=0),
    max_employees: Optional[int] = Query(None, alias="maxEmployees", ge=0),
    db: Session = Depends(get_db)
):
    """
    List companies ordered by name.

    Optional filters:
    - name: case-insensitive, partial match
    - minEmployees / maxEmployees: employee count range (400 if min > max)

    Authorization required: none
    """
    filters = None
    if name is not None or min_employees is not None or max_employees is not None:
        filters = CompanyFilter(name=name, min_employees=min_employees, max_employees=max_employees)

    return company_crud.find_all(db, filters)


@router.get("/{handle}", response_model=CompanyDetailResponse)
def get_company(handle: str, db: Session = Depends(get_db)):
    """
    Retrieve a company and the jobs it has posted.

    Authorization required: none
    """
    return company_crud.get(db, handle)


@router.patch("/{handle}", response_model=CompanyResponse)
def update_company(
    handle: str,
    request: CompanyUpdateRequest,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Partially update a company.

    Fields can be: { name, description, numEmployees, logoUrl }

    Authorization required: admin
    """
    return company_crud.update(db, handle, request)


@router.delete("/{handle}")
def delete_company(
    handle: str,
    db: Session = Depends(get_db),
    admin_user: CurrentUser = Depends(get_admin_user)
):
    """
    Delete a company and its jobs.

    Authorization required: admin
    """
    company_crud.remove(db, handle)
    logger.info(f"Admin {admin_user.username} deleted company {handle}")

    return {"deleted": handle}
