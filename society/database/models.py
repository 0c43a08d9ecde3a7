import enum
from datetime import datetime, date
from typing import Optional, List
from sqlalchemy import String, ForeignKey, Integer, DateTime, Text, DATE, CheckConstraint, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func
from society.database.core import Base

# Enums
class PaymentStatus(str, enum.Enum):
    paid = "Paid"
    unpaid = "Unpaid"

class ComplaintCategory(str, enum.Enum):
    water = "Water"
    electricity = "Electricity"
    lift = "Lift"
    cleaning = "Cleaning"
    other = "Other"

class ComplaintStatus(str, enum.Enum):
    pending = "Pending"
    in_progress = "In Progress"
    resolved = "Resolved"

class Severity(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"

class Amenity(str, enum.Enum):
    clubhouse = "Clubhouse"
    gym = "Gym"
    swimming_pool = "Swimming Pool"

class TimeSlot(str, enum.Enum):
    early_morning = "06:00 AM - 08:00 AM"
    morning = "08:00 AM - 10:00 AM"
    afternoon = "04:00 PM - 06:00 PM"
    evening = "06:00 PM - 08:00 PM"

class BookingStatus(str, enum.Enum):
    confirmed = "Confirmed"
    cancelled = "Cancelled"

class VisitorStatus(str, enum.Enum):
    inside = "In"
    left = "Out"

class Role(str, enum.Enum):
    admin = "admin"
    resident = "resident"
    security = "security"

# Alert addressed to every tower
ALL_TOWERS = "All"


# 3.1 Tower
class Tower(Base):
    __tablename__ = "towers"

    id: Mapped[str] = mapped_column(String(4), primary_key=True)  # Letter code: A, B, ...
    name: Mapped[str] = mapped_column(String)

    flats: Mapped[List["Flat"]] = relationship(back_populates="tower")


# 3.2 Flat
class Flat(Base):
    __tablename__ = "flats"

    id: Mapped[str] = mapped_column(String(16), primary_key=True)  # e.g. 'A-101'
    tower_id: Mapped[str] = mapped_column(ForeignKey("towers.id"))
    floor: Mapped[int] = mapped_column(Integer)
    flat_number: Mapped[int] = mapped_column(Integer)
    owner_name: Mapped[Optional[str]] = mapped_column(String)
    maintenance_status: Mapped[PaymentStatus] = mapped_column(String, default=PaymentStatus.unpaid.value)

    __table_args__ = (
        CheckConstraint("substr(id, 1, length(tower_id) + 1) = tower_id || '-'", name="ck_flat_tower_prefix"),
    )

    tower: Mapped["Tower"] = relationship(back_populates="flats")
    bills: Mapped[List["Bill"]] = relationship(back_populates="flat")


# 3.3 BillingCycle - one row per generated batch
class BillingCycle(Base):
    __tablename__ = "billing_cycles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    label: Mapped[str] = mapped_column(String, unique=True, index=True)
    amount: Mapped[int] = mapped_column(Integer)
    due_date: Mapped[date] = mapped_column(DATE)
    created_by: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    bills: Mapped[List["Bill"]] = relationship(back_populates="cycle")


# 3.4 Bill
class Bill(Base):
    __tablename__ = "bills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    flat_id: Mapped[str] = mapped_column(ForeignKey("flats.id"), index=True)
    amount: Mapped[int] = mapped_column(Integer)
    cycle_label: Mapped[str] = mapped_column(String, index=True)  # "March 2026"
    # Null for bills created outside a generation batch
    cycle_id: Mapped[Optional[int]] = mapped_column(ForeignKey("billing_cycles.id", ondelete="CASCADE"), nullable=True)
    due_date: Mapped[date] = mapped_column(DATE)
    status: Mapped[PaymentStatus] = mapped_column(String, default=PaymentStatus.unpaid.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_bill_amount_positive"),
    )

    flat: Mapped["Flat"] = relationship(back_populates="bills")
    cycle: Mapped[Optional["BillingCycle"]] = relationship(back_populates="bills")


# 3.5 User (credential is owned by the auth collaborator)
class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    username: Mapped[str] = mapped_column(String, unique=True, index=True)
    password: Mapped[Optional[str]] = mapped_column(String)
    role: Mapped[Role] = mapped_column(String, default=Role.resident.value)
    flat_id: Mapped[Optional[str]] = mapped_column(ForeignKey("flats.id"), nullable=True)
    name: Mapped[Optional[str]] = mapped_column(String)
    email: Mapped[Optional[str]] = mapped_column(String)


# 3.6 Complaint
class Complaint(Base):
    __tablename__ = "complaints"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    flat_id: Mapped[str] = mapped_column(ForeignKey("flats.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    title: Mapped[str] = mapped_column(String)
    description: Mapped[Optional[str]] = mapped_column(Text)
    category: Mapped[ComplaintCategory] = mapped_column(String, default=ComplaintCategory.other.value)
    status: Mapped[ComplaintStatus] = mapped_column(String, default=ComplaintStatus.pending.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# 3.7 Alert
class Alert(Base):
    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tower: Mapped[str] = mapped_column(String, default=ALL_TOWERS)  # 'All' or a tower id
    title: Mapped[str] = mapped_column(String)
    message: Mapped[str] = mapped_column(Text)
    severity: Mapped[Severity] = mapped_column(String, default=Severity.low.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# 3.8 Event
class Event(Base):
    __tablename__ = "events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    title: Mapped[str] = mapped_column(String)
    description: Mapped[Optional[str]] = mapped_column(Text)
    event_date: Mapped[date] = mapped_column("date", DATE)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# 3.9 Booking
class Booking(Base):
    __tablename__ = "bookings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    flat_id: Mapped[str] = mapped_column(ForeignKey("flats.id"), index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    amenity: Mapped[Amenity] = mapped_column(String)
    booking_date: Mapped[date] = mapped_column("date", DATE)
    time_slot: Mapped[TimeSlot] = mapped_column(String)
    status: Mapped[BookingStatus] = mapped_column(String, default=BookingStatus.confirmed.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())


# A slot is held by at most one live booking; cancelled rows release it
Index(
    "uq_booking_slot", Booking.amenity, Booking.booking_date, Booking.time_slot,
    unique=True,
    sqlite_where=text("status != 'Cancelled'"),
    postgresql_where=text("status != 'Cancelled'"),
)


# 3.10 Visitor
class Visitor(Base):
    __tablename__ = "visitors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String)
    tower: Mapped[str] = mapped_column(String)
    flat_id: Mapped[str] = mapped_column(ForeignKey("flats.id"), index=True)
    entry_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    exit_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[VisitorStatus] = mapped_column(String, default=VisitorStatus.inside.value)

    __table_args__ = (
        CheckConstraint(
            "(status = 'In' AND exit_time IS NULL) OR (status = 'Out' AND exit_time IS NOT NULL)",
            name="ck_visitor_exit_matches_status",
        ),
    )


# 3.11 Expense (append-only, read by the budget heuristic)
class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    category: Mapped[str] = mapped_column(String)
    amount: Mapped[int] = mapped_column(Integer)
    expense_date: Mapped[date] = mapped_column("date", DATE, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text)


# 3.12 ActivityLog (append-only)
class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[Optional[int]] = mapped_column(ForeignKey("users.id"), nullable=True)
    action: Mapped[str] = mapped_column(String)
    details: Mapped[Optional[str]] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    user: Mapped[Optional["User"]] = relationship()
