from datetime import datetime, timezone
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

class ListQuery(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    skip: Optional[int] = Field(None, ge=0)
    limit: Optional[int] = Field(None, ge=0)

class ListResult(BaseModel):
    """One page of a role-scoped query"""
    model_config = ConfigDict(populate_by_name=True)

    items: list[dict]
    total_count: int = Field(alias="totalCount")
    has_next: bool = Field(alias="hasNext")
    current_page: int = Field(alias="currentPage")
    page_size: int = Field(alias="pageSize")
    next_skip: Optional[int] = Field(None, alias="nextSkip")
