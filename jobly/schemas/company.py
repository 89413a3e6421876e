from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, Dict, List, Optional

from jobly.schemas.job import JobResponse


class CompanyCreateRequest(BaseModel):
    """Schema for creating a new company"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    handle: str = Field(..., min_length=1, max_length=25)
    name: str = Field(..., min_length=1)
    description: str = ""
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, max_length=2000, alias="logoUrl")


class CompanyUpdateRequest(BaseModel):
    """
    Schema for a partial company update.

    Only the fields present in the request body are changed; the handle
    cannot be changed.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    num_employees: Optional[int] = Field(None, ge=0, alias="numEmployees")
    logo_url: Optional[str] = Field(None, max_length=2000, alias="logoUrl")

    @field_validator("name", "description")
    @classmethod
    def not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("cannot be null")
        return v


class CompanyResponse(BaseModel):
    """Schema for company response"""
    model_config = ConfigDict(populate_by_name=True)

    handle: str
    name: str
    description: str
    num_employees: Optional[int] = Field(None, alias="numEmployees")
    logo_url: Optional[str] = Field(None, alias="logoUrl")


class CompanyDetailResponse(CompanyResponse):
    """Company with the jobs it has posted"""
    jobs: List[JobResponse] = []


class CompanyFilter(BaseModel):
    """Optional search filters for listing companies"""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    min_employees: Optional[int] = Field(None, alias="minEmployees")
    max_employees: Optional[int] = Field(None, alias="maxEmployees")

    def to_criteria(self) -> Dict[str, Any]:
        """Filters that were actually given, keyed by their query-string names"""
        return self.model_dump(by_alias=True, exclude_none=True)
