import logging
from datetime import date
from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from society.database.models import Booking, BookingStatus, Amenity, TimeSlot
from society.schemas.caller import Caller
from society.services.activity_service import log_activity
from society.services.errors import NotFound, SlotTaken, ValidationFailure, PermissionDenied


class BookingService:
    def __init__(self, session_factory: async_sessionmaker):
        self._sessions = session_factory

    async def book(self, caller: Caller, amenity: Amenity, booking_date: date, time_slot: TimeSlot) -> Booking:
        """
        Reserve (amenity, date, time slot) for the caller's flat.

        The pre-check gives the common conflict a clean error without a write;
        the partial unique index on the slot triple is what guarantees
        exclusivity when two requests race past the check.
        """
        if not caller.flat_id:
            raise ValidationFailure("Booking requires a flat")

        amenity = Amenity(amenity)
        time_slot = TimeSlot(time_slot)

        async with self._sessions() as session:
            async with session.begin():
                existing = await session.execute(
                    select(Booking.id).where(
                        Booking.amenity == amenity.value,
                        Booking.booking_date == booking_date,
                        Booking.time_slot == time_slot.value,
                        Booking.status != BookingStatus.cancelled.value
                    ).limit(1)
                )
                if existing.scalar_one_or_none() is not None:
                    raise SlotTaken(amenity.value, booking_date, time_slot.value)

                booking = Booking(
                    flat_id=caller.flat_id,
                    user_id=caller.user_id,
                    amenity=amenity.value,
                    booking_date=booking_date,
                    time_slot=time_slot.value,
                    status=BookingStatus.confirmed.value
                )
                session.add(booking)
                try:
                    await session.flush()
                except IntegrityError as e:
                    raise SlotTaken(amenity.value, booking_date, time_slot.value) from e

                log_activity(session, caller.user_id, "BOOK_AMENITY", f"Booked {amenity.value} for {booking_date.isoformat()}")

        logging.info(f"Flat {caller.flat_id} booked {amenity.value} on {booking_date} ({time_slot.value})")
        return booking

    async def cancel(self, caller: Caller, booking_id: int) -> Booking:
        """Cancel a booking and release its slot. Only the booking's flat or an admin may cancel."""
        async with self._sessions() as session:
            async with session.begin():
                booking = (await session.execute(
                    select(Booking).where(Booking.id == booking_id).with_for_update()
                )).scalar_one_or_none()
                if not booking:
                    raise NotFound("Booking", booking_id)

                if not caller.is_admin and booking.flat_id != caller.flat_id:
                    raise PermissionDenied("Only the booking flat or an admin can cancel this booking")

                if booking.status == BookingStatus.cancelled.value:
                    return booking

                booking.status = BookingStatus.cancelled.value
                log_activity(session, caller.user_id, "CANCEL_BOOKING", f"Cancelled booking {booking_id}")

        logging.info(f"User {caller.user_id} cancelled booking {booking_id}")
        return booking

    async def list_bookings(self, flat_id: Optional[str] = None) -> List[Booking]:
        async with self._sessions() as session:
            stmt = select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc())
            if flat_id:
                stmt = stmt.where(Booking.flat_id == flat_id)
            result = await session.execute(stmt)
            return list(result.scalars().all())
