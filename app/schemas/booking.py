"""
Pydantic schemas for booking requests.

Vehicle fields are accepted under both their camelCase and snake_case
names; everything else uses camelCase on the wire.
"""
from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Optional
from datetime import datetime


# ============================================================================
# Request Schemas (for incoming data)
# ============================================================================

class BookingCreateRequest(BaseModel):
    """Reserve a slot. `startAt` may carry a UTC offset; it is converted to business time."""
    model_config = ConfigDict(populate_by_name=True)

    service_id: int = Field(..., alias="serviceId", gt=0)
    resource_id: Optional[int] = Field(None, alias="resourceId", gt=0)
    start_at: datetime = Field(..., alias="startAt")
    notes: Optional[str] = Field(None, max_length=2000)
    vehicle_type: Optional[str] = Field(
        None,
        max_length=100,
        validation_alias=AliasChoices("vehicleType", "vehicle_type")
    )
    license_plate: Optional[str] = Field(
        None,
        max_length=20,
        validation_alias=AliasChoices("licensePlate", "license_plate")
    )


class BookingUpdateRequest(BaseModel):
    """
    Partial update. Only the fields present in the body are applied;
    any of serviceId, resourceId or startAt triggers a reschedule.
    """
    model_config = ConfigDict(populate_by_name=True)

    service_id: Optional[int] = Field(None, alias="serviceId", gt=0)
    resource_id: Optional[int] = Field(None, alias="resourceId", gt=0)
    start_at: Optional[datetime] = Field(None, alias="startAt")
    status: Optional[str] = None
    notes: Optional[str] = Field(None, max_length=2000)
    vehicle_type: Optional[str] = Field(
        None,
        max_length=100,
        validation_alias=AliasChoices("vehicleType", "vehicle_type")
    )
    license_plate: Optional[str] = Field(
        None,
        max_length=20,
        validation_alias=AliasChoices("licensePlate", "license_plate")
    )

    def changes(self) -> dict:
        """Fields the client actually sent, keyed by attribute name"""
        return self.model_dump(exclude_unset=True)
