from datetime import date
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, AliasChoices, field_validator, model_validator

from society.database.models import Amenity, TimeSlot, ComplaintCategory, ComplaintStatus, Severity, ALL_TOWERS

FLAT_ID_PATTERN = r"^[A-Z]+-[1-9]\d{2,}$"


def _reject_bool(v):
    # JSON true/false would otherwise be coerced to 1/0
    if isinstance(v, bool):
        raise ValueError("Must be a whole number")
    return v


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, extra="ignore")


class GenerateBillsRequest(RequestModel):
    cycle_label: str = Field(
        min_length=1, max_length=64,
        validation_alias=AliasChoices("cycleLabel", "cycle_label", "month")
    )
    amount: int = Field(gt=0, description="Maintenance amount per flat")
    due_date: date = Field(validation_alias=AliasChoices("dueDate", "due_date"))

    @field_validator("amount", mode="before")
    def parse_amount(cls, v):
        v = _reject_bool(v)
        if isinstance(v, str):
            # Accept "1,500" / "1 500"
            v = v.replace(",", "").replace(" ", "")
            assert v.isdigit(), "Must be a whole number"
        return v


class MarkPaidRequest(RequestModel):
    flat_id: str = Field(pattern=FLAT_ID_PATTERN, validation_alias=AliasChoices("flatId", "flat_id"))
    bill_id: int = Field(gt=0, validation_alias=AliasChoices("billId", "bill_id"))

    @field_validator("bill_id", mode="before")
    def bill_id_not_bool(cls, v):
        return _reject_bool(v)


class BookRequest(RequestModel):
    amenity: Amenity
    booking_date: date = Field(validation_alias=AliasChoices("date", "booking_date"))
    time_slot: TimeSlot = Field(validation_alias=AliasChoices("timeSlot", "time_slot"))


class IdRequest(RequestModel):
    id: int = Field(gt=0)

    @field_validator("id", mode="before")
    def id_not_bool(cls, v):
        return _reject_bool(v)


class VisitorEntryRequest(RequestModel):
    name: str = Field(min_length=1, max_length=120)
    tower: str = Field(min_length=1, max_length=4)
    flat_id: str = Field(pattern=FLAT_ID_PATTERN, validation_alias=AliasChoices("flatId", "flat_id"))

    @field_validator("tower", mode="before")
    def upper_tower(cls, v):
        return v.strip().upper() if isinstance(v, str) else v

    @model_validator(mode="after")
    def tower_matches_flat(self):
        if self.flat_id.split("-", 1)[0] != self.tower:
            raise ValueError(f"Flat {self.flat_id} is not in tower {self.tower}")
        return self


class ComplaintRequest(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    category: ComplaintCategory = ComplaintCategory.other


class ComplaintStatusRequest(RequestModel):
    id: int = Field(gt=0)
    status: ComplaintStatus

    @field_validator("id", mode="before")
    def id_not_bool(cls, v):
        return _reject_bool(v)


class AlertRequest(RequestModel):
    tower: str = ALL_TOWERS
    title: str = Field(min_length=1, max_length=200)
    message: str = Field(min_length=1)
    severity: Severity = Severity.low


class EventRequest(RequestModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    event_date: date = Field(validation_alias=AliasChoices("date", "event_date"))
