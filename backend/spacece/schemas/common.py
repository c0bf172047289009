"""
Shared schema pieces: the camelCase base model, the user summary used for
populated references, and the response envelope.
"""
from pydantic import BaseModel, ConfigDict, AfterValidator, Field
from typing import Annotated, Any, Dict, Optional
from datetime import date, datetime, timezone


def _to_naive_utc(value: datetime) -> datetime:
    # DateTime columns are timezone-naive UTC
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


UTCDateTime = Annotated[datetime, AfterValidator(_to_naive_utc)]


class CamelModel(BaseModel):
    """Accepts either the camelCase wire name or the Python field name"""
    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class UserSummary(CamelModel):
    """Populated user reference: id, name and email only"""
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


class ChildSummary(CamelModel):
    """Populated child reference"""
    id: str
    name: Optional[str] = None
    dob: Optional[date] = None
    gender: Optional[str] = None


class Address(CamelModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")
    country: Optional[str] = None


def dump(model: BaseModel) -> Dict[str, Any]:
    """Serialize to the JSON wire shape"""
    return model.model_dump(by_alias=True, mode="json")


def success_response(
    data: Any = None,
    count: Optional[int] = None,
    message: Optional[str] = None
) -> Dict[str, Any]:
    """Build the ``{success, data, count, message}`` envelope, omitting empty keys"""
    body: Dict[str, Any] = {"success": True}
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    if message is not None:
        body["message"] = message
    return body
