"""Typed views over Salesforce JSON bodies.

The workflow passes bodies through verbatim; these models only check the
fields a later step depends on and never replace the raw dictionaries.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from common.datetime import parse_iso8601

__all__ = ["AuthResult", "CreateResponse", "LeadSummary"]


class AuthResult(BaseModel):
    """Token endpoint response; unknown keys are kept so ``model_dump`` is the full body."""

    model_config = ConfigDict(extra="allow")

    access_token: str
    instance_url: str

    def __repr__(self) -> str:
        # keep the bearer token out of tracebacks and debug logs
        return f"AuthResult(instance_url={self.instance_url!r}, access_token='***')"


class CreateResponse(BaseModel):
    """Body of ``POST /sobjects/<type>``."""

    model_config = ConfigDict(extra="allow")

    id: str = Field(min_length=1)
    success: bool = True
    errors: List[Any] = Field(default_factory=list)


class LeadSummary(BaseModel):
    """A handful of Lead fields for log lines."""

    model_config = ConfigDict(extra="ignore")

    Id: str
    Name: Optional[str] = None
    Company: Optional[str] = None
    Status: Optional[str] = None
    CreatedDate: Optional[datetime] = None

    @field_validator("CreatedDate", mode="before")
    @classmethod
    def _parse_created(cls, val: Any) -> Any:
        if not val:
            return None
        try:
            return parse_iso8601(val)
        except (TypeError, ValueError):
            return None

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "LeadSummary":
        return cls.model_validate(record)

    def describe(self) -> str:
        created = self.CreatedDate.isoformat() if self.CreatedDate else "n/a"
        return (
            f"id={self.Id} name={self.Name or 'n/a'} company={self.Company or 'n/a'} "
            f"status={self.Status or 'n/a'} created={created}"
        )
