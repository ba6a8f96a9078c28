from typing import Any, Sequence

from sqlalchemy import insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.application.interfaces.booking_repo import BookingRepo
from app.domain.entities.booking import (
    TERMINAL_STATUSES,
    Booking,
    BookingStatus,
    PricingSnapshot,
    RentalType,
)
from app.domain.errors import OptimisticLockError
from app.infrastructure.db.tables import bookings


def _to_entity(row: Any) -> Booking:
    return Booking(
        id=row["id"],
        user_id=row["user_id"],
        trailer_id=row["trailer_id"],
        start_time=row["start_time"],
        end_time=row["end_time"],
        rental_type=RentalType(row["rental_type"]),
        pricing=PricingSnapshot(
            base_cost=row["base_cost"],
            add_on_cost=row["add_on_cost"],
            deposit_amount=row["deposit_amount"],
            total=row["total_amount"],
            currency_code=row["currency_code"],
        ),
        add_ons=[a for a in (row["add_ons"] or "").split(",") if a],
        status=BookingStatus(row["status"]),
        lock_version=row["lock_version"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _to_values(booking: Booking) -> dict[str, Any]:
    return {
        "id": booking.id,
        "user_id": booking.user_id,
        "trailer_id": booking.trailer_id,
        "start_time": booking.start_time,
        "end_time": booking.end_time,
        "rental_type": booking.rental_type.value,
        "add_ons": ",".join(booking.add_ons),
        "base_cost": booking.pricing.base_cost,
        "add_on_cost": booking.pricing.add_on_cost,
        "deposit_amount": booking.pricing.deposit_amount,
        "total_amount": booking.pricing.total,
        "currency_code": booking.pricing.currency_code,
        "status": booking.status.value,
        "lock_version": booking.lock_version,
        "created_at": booking.created_at,
        "updated_at": booking.updated_at,
    }


class BookingRepoSQL(BookingRepo):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, booking_id: str) -> Booking | None:
        result = await self._session.execute(select(bookings).where(bookings.c.id == booking_id))
        row = result.mappings().first()
        return _to_entity(row) if row else None

    async def list_by_user(self, user_id: str) -> Sequence[Booking]:
        result = await self._session.execute(
            select(bookings).where(bookings.c.user_id == user_id).order_by(bookings.c.start_time)
        )
        return [_to_entity(row) for row in result.mappings().all()]

    async def list_blocking_for_trailer(self, trailer_id: str) -> Sequence[Booking]:
        stmt = select(bookings).where(
            bookings.c.trailer_id == trailer_id,
            bookings.c.status.not_in([s.value for s in TERMINAL_STATUSES]),
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def list_by_status(self, status: BookingStatus, limit: int = 50) -> Sequence[Booking]:
        stmt = (
            select(bookings)
            .where(bookings.c.status == status.value)
            .order_by(bookings.c.updated_at)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [_to_entity(row) for row in result.mappings().all()]

    async def create(self, booking: Booking) -> Booking:
        await self._session.execute(insert(bookings).values(_to_values(booking)))
        return booking

    async def save(self, booking: Booking, expected_lock_version: int) -> Booking:
        values = _to_values(booking)
        values.pop("id")
        stmt = (
            update(bookings)
            .where(bookings.c.id == booking.id)
            .where(bookings.c.lock_version == expected_lock_version)
            .values(values)
        )
        result = await self._session.execute(stmt)
        if result.rowcount == 0:
            current = await self._session.execute(
                select(bookings.c.lock_version).where(bookings.c.id == booking.id)
            )
            raise OptimisticLockError(booking.id, expected_lock_version, current.scalar())
        return booking
