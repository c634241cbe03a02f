"""
Pydantic schemas for advisory appointments
"""
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional
from datetime import datetime


class AppointmentCreateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    client_name: str = Field(..., alias="clientName", min_length=1, max_length=200)
    client_email: EmailStr = Field(..., alias="clientEmail")
    appointment_type_id: int = Field(..., alias="type", gt=0)
    appointment_date: datetime = Field(..., alias="appointmentDate")
    notes: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)


class AppointmentStatusRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=20)
