from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]

WEEKDAYS: tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


class TimeSlot(BaseModel):
    """
    One weekly bookable window, as entered in the booking step.

    Times stay as "HH:MM" text; the booking step rule checks their shape so that
    odd values loaded from storage never fail model construction.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    day: Weekday
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")
    # Service this slot is reserved for (blocking service), if any
    service: str | None = None
    notes: str | None = None


class AvailabilityPeriod(BaseModel):
    """
    Date range during which a rental item can (or cannot) be booked.
    """
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    start_date: str = Field(alias="startDate")
    end_date: str = Field(alias="endDate")
    is_available: bool = Field(default=True, alias="isAvailable")
    notes: str | None = None


class BookingSetup(BaseModel):
    booking_enabled: bool = False
    service_name: str = ""
    time_slots: list[TimeSlot] = Field(default_factory=list)
    # Only meaningful for rental listings
    availability_periods: list[AvailabilityPeriod] = Field(default_factory=list)
