"""
This module defines the data models for the DentalCare application.

Records are immutable pydantic models. Python attributes are snake_case; the
persisted JSON uses camelCase keys (`patientId`, `appointmentDate`, ...) so the
stored documents keep the layout of the original browser application.

Create and update payloads have their own models. Updates are patches: only
the fields a caller actually supplies are merged into the stored record.
"""
# dentalcare/models.py

from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Role(str, Enum):
    ADMIN = "Admin"
    PATIENT = "Patient"


class IncidentStatus(str, Enum):
    SCHEDULED = "Scheduled"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _local_naive(value):
    # Appointment times are wall-clock times at the clinic.
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


class _Record(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    def to_json_dict(self) -> dict:
        """Returns the JSON-ready form used for persistence."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class _Patch(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def changes(self) -> dict:
        """Returns only the fields the caller explicitly set, keyed by attribute name."""
        return self.model_dump(exclude_unset=True)


class User(_Record):
    """An authenticated identity.

    Attributes:
        id (str): Identity table key.
        email (str): Login email.
        role (Role): Admin or Patient.
        patient_id (str, optional): The Patient record a Patient-role user maps to.
    """
    id: str
    email: str
    role: Role
    patient_id: Optional[str] = None


class FileAttachment(_Record):
    """A file embedded in an incident.

    Attributes:
        id (str): Unique attachment id.
        name (str): Original file name.
        type (str): MIME type as reported at upload, possibly empty.
        url (str): Self-contained `data:` URL carrying the content.
        size (int): Size in bytes.
    """
    id: str
    name: str
    type: str = ""
    url: str
    size: int = Field(ge=0)


class PatientCreate(_Record):
    """Fields a caller supplies when registering a patient."""
    name: str
    dob: date
    contact: str
    email: Optional[str] = None
    address: Optional[str] = None
    health_info: str = ""
    blood_group: Optional[str] = None
    allergies: Optional[str] = None
    emergency_contact: Optional[str] = None


class Patient(PatientCreate):
    """A stored patient record.

    Attributes:
        id (str): Unique, immutable identifier assigned by the store.
        created_at (datetime): UTC creation time assigned by the store.
    """
    id: str
    created_at: datetime


class PatientUpdate(_Patch):
    name: Optional[str] = None
    dob: Optional[date] = None
    contact: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    health_info: Optional[str] = None
    blood_group: Optional[str] = None
    allergies: Optional[str] = None
    emergency_contact: Optional[str] = None


class IncidentCreate(_Record):
    """Fields a caller supplies when booking an appointment."""
    patient_id: str
    title: str
    description: str = ""
    comments: str = ""
    appointment_date: datetime
    cost: Optional[float] = Field(default=None, ge=0)
    treatment: Optional[str] = None
    status: IncidentStatus = IncidentStatus.SCHEDULED
    next_date: Optional[datetime] = None
    files: list[FileAttachment] = Field(default_factory=list)

    @field_validator("appointment_date", "next_date")
    @classmethod
    def _wall_clock(cls, value):
        return _local_naive(value)


class Incident(IncidentCreate):
    """A stored appointment / treatment event.

    Attributes:
        id (str): Unique identifier assigned by the store.
        created_at (datetime): UTC creation time assigned by the store.
    """
    id: str
    created_at: datetime


class IncidentUpdate(_Patch):
    patient_id: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    comments: Optional[str] = None
    appointment_date: Optional[datetime] = None
    cost: Optional[float] = Field(default=None, ge=0)
    treatment: Optional[str] = None
    status: Optional[IncidentStatus] = None
    next_date: Optional[datetime] = None
    files: Optional[list[FileAttachment]] = None

    @field_validator("appointment_date", "next_date")
    @classmethod
    def _wall_clock(cls, value):
        return _local_naive(value)
