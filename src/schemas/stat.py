"""Listen statistics schemas."""

from typing import Any, Dict, Optional

from pydantic import Field

from .base import BaseSchema


class StatUpdateAttributes(BaseSchema):
    """Only the listen count is writable; revenue is derived from it."""

    listens_count: Optional[int] = Field(None, description="New total listen count")


class StatUpdateResource(BaseSchema):
    """JSON:API resource for a stat update."""

    type: str = Field("stat", description="Resource type")
    attributes: StatUpdateAttributes


class StatUpdateRequest(BaseSchema):
    """Request schema for updating listen statistics."""

    data: StatUpdateResource = Field(description="Stat data to update")


def stat_attributes(stat) -> Dict[str, Any]:
    return stat.to_dict()
