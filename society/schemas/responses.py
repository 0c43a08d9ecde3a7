from datetime import date, datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def dump(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class StatsResponse(CamelModel):
    total_flats: int
    paid_flats: int
    pending_complaints: int
    active_visitors: int
    total_collected: int
    total_pending: int


class PredictionResponse(CamelModel):
    suggestion: str
    growth: float
    confidence: Optional[float] = None
    recent_expense: Optional[int] = None
    previous_expense: Optional[int] = None


# Row views mirror the table columns
class RowModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


class FlatOut(RowModel):
    id: str
    tower_id: str
    floor: int
    flat_number: int
    owner_name: Optional[str] = None
    maintenance_status: str


class BillOut(RowModel):
    id: int
    flat_id: str
    amount: int
    cycle_label: str
    due_date: date
    status: str


class AlertOut(RowModel):
    id: int
    tower: str
    title: str
    message: str
    severity: str
    created_at: Optional[datetime] = None


class EventOut(RowModel):
    id: int
    title: str
    description: Optional[str] = None
    event_date: date


class VisitorOut(RowModel):
    id: int
    name: str
    tower: str
    flat_id: str
    entry_time: Optional[datetime] = None
    exit_time: Optional[datetime] = None
    status: str


class ComplaintOut(RowModel):
    id: int
    flat_id: str
    title: str
    description: Optional[str] = None
    category: str
    status: str
    created_at: Optional[datetime] = None


class ActivityOut(RowModel):
    id: int
    user_id: Optional[int] = None
    user_name: Optional[str] = None
    action: str
    details: Optional[str] = None
    timestamp: Optional[datetime] = None


class DashboardOut(BaseModel):
    flat: FlatOut
    bills: List[BillOut]
    alerts: List[AlertOut]
    visitors: List[VisitorOut]
    complaints: List[ComplaintOut]
