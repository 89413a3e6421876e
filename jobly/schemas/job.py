from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from typing import Any, Dict, Optional


class JobCreateRequest(BaseModel):
    """Schema for creating a new job"""
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: str = Field(..., min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1, decimal_places=3)
    company_handle: str = Field(..., min_length=1, max_length=25, alias="companyHandle")


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    Only the fields present in the request body are changed. The id and the
    owning company cannot be changed.
    """
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    title: Optional[str] = Field(None, min_length=1)
    salary: Optional[int] = Field(None, ge=0)
    equity: Optional[Decimal] = Field(None, ge=0, le=1, decimal_places=3)

    @field_validator("title")
    @classmethod
    def title_not_null(cls, v: Optional[str]) -> str:
        if v is None:
            raise ValueError("title cannot be null")
        return v


class JobResponse(BaseModel):
    """Schema for job response"""
    model_config = ConfigDict(populate_by_name=True)

    id: int
    title: str
    salary: Optional[int] = None
    equity: Optional[Decimal] = None
    company_handle: str = Field(..., alias="companyHandle")

    @field_serializer("equity")
    def serialize_equity(self, equity: Optional[Decimal]) -> Optional[str]:
        """Render equity as a plain decimal string ("0.1", not "0.100")"""
        if equity is None:
            return None
        return format(equity.normalize(), "f")


class JobFilter(BaseModel):
    """Optional search filters for listing jobs"""
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    min_salary: Optional[int] = Field(None, alias="minSalary")
    has_equity: Optional[bool] = Field(None, alias="hasEquity")
    company_handle: Optional[str] = Field(None, alias="companyHandle")

    def to_criteria(self) -> Dict[str, Any]:
        """Filters that were actually given, keyed by their query-string names"""
        return self.model_dump(by_alias=True, exclude_none=True)
