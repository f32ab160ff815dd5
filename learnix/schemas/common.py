from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PortalModel(BaseModel):
    """Base for records exchanged with the backend and the UI (camelCase on the wire)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="allow",
    )


class ApiResponse(BaseModel):
    """Result envelope returned by every backend call."""

    success: bool
    data: Any = None
    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class ActionResult(BaseModel):
    success: bool
    message: Optional[str] = None
    count: Optional[int] = None
