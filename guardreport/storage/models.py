"""
Document models for the 'users' and 'reports' collections.

Documents are stored and served with camelCase keys (handcuffsUsed,
loginTime, ...). The MongoDB ObjectId is exposed as a string under '_id'.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

REQUIRED_REPORT_FIELDS = ("area", "store", "guards", "type", "description")


class CamelModel(BaseModel):
    """Base model reading and writing camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(CamelModel):
    """Coordinates where the incident took place."""

    lat: Optional[float] = None
    lng: Optional[float] = None


class StoredDocument(CamelModel):
    """A record that has been assigned an identity by the database."""

    id: Optional[str] = Field(default=None, alias="_id")

    @field_validator("id", mode="before")
    @classmethod
    def stringify_object_id(cls, v: Any) -> Optional[str]:
        return None if v is None else str(v)

    def to_document(self) -> dict:
        """Dump to the dict stored in MongoDB (identity left to the driver)."""
        return self.model_dump(by_alias=True, exclude={"id"})

    def to_response(self) -> dict:
        """Dump to a JSON-ready dict for API responses."""
        return self.model_dump(mode="json", by_alias=True)


class LoginEvent(StoredDocument):
    """One username check-in. Collection: users"""

    username: str
    login_time: datetime


class ReportFields(CamelModel):
    """
    Report fields as submitted by a guard.

    Every field is optional here so that presence can be checked explicitly
    and reported with a single error message.
    """

    area: Optional[str] = None
    store: Optional[str] = None
    guards: Optional[List[str]] = None
    type: Optional[str] = None  # Grip, PL13§, ...
    description: Optional[str] = None
    handcuffs_used: Optional[bool] = None
    police_called: Optional[bool] = None
    patrol_number: Optional[str] = None
    position: Optional[Position] = None

    def missing_fields(self) -> List[str]:
        """Names of required fields that are absent or empty."""
        return [
            to_camel(name) for name in REQUIRED_REPORT_FIELDS
            if not getattr(self, name)
        ]


class Report(StoredDocument):
    """A persisted guard incident. Collection: reports"""

    area: str
    store: str
    guards: List[str]
    type: str
    description: str
    handcuffs_used: Optional[bool] = None
    police_called: Optional[bool] = None
    patrol_number: Optional[str] = None
    position: Optional[Position] = None
    timestamp: datetime
