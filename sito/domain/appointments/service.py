"""Appointment service - slot generation and double-booking-safe reservations"""

import logging
from datetime import date, datetime, time, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentSlot, Profile
from ...services.notification_service import EVENT_APPOINTMENT, NotificationOutbox, OutboundEvent
from ..access.schemas import Action
from ..access.service import EligibilityResolver
from .repository import AppointmentRepository
from .schemas import SlotGenerate

logger = logging.getLogger(__name__)


def slice_window(
    day: date, start: time, end: time, interval_minutes: int
) -> list[tuple[datetime, datetime]]:
    """
    Cut [start, end) on ``day`` into contiguous slots of ``interval_minutes``.
    A trailing slot that would run past ``end`` is dropped.
    """
    window_start = datetime.combine(day, start)
    window_end = datetime.combine(day, end)
    if interval_minutes <= 0 or window_end <= window_start:
        return []

    step = timedelta(minutes=interval_minutes)
    slots = []
    current = window_start
    while current + step <= window_end:
        slots.append((current, current + step))
        current += step
    return slots


def slot_duration_minutes(slot: AppointmentSlot) -> int:
    return max(0, int((slot.end_time - slot.start_time).total_seconds() // 60))


def appointment_total(rate_per_hour: float, duration_minutes: int) -> float:
    return round(rate_per_hour / 60 * duration_minutes, 2)


class AppointmentService:
    """Service layer for appointment slots and bookings"""

    def __init__(self, db: Session, outbox: Optional[NotificationOutbox] = None):
        self.db = db
        self.repo = AppointmentRepository()
        self.outbox = outbox

    # ------------------------------------------------------------------
    # Owner side
    # ------------------------------------------------------------------

    def generate_slots(self, data: SlotGenerate, owner: Profile) -> list[AppointmentSlot]:
        if data.end_time <= data.start_time:
            raise HTTPException(status_code=400, detail="End time must be after start time")

        if data.product_id and not self.repo.owns_product(self.db, data.product_id, owner.id):
            raise HTTPException(status_code=404, detail="Product not found")

        windows = slice_window(data.date, data.start_time, data.end_time, data.interval_minutes)
        if not windows:
            raise HTTPException(
                status_code=400,
                detail="No slots could be created with the given time range and interval.",
            )

        slots = [
            AppointmentSlot(
                owner_id=owner.id,
                start_time=slot_start,
                end_time=slot_end,
                duration_minutes=data.interval_minutes,
                rate_per_hour=data.rate_per_hour,
                is_available=True,
                product_id=data.product_id,
            )
            for slot_start, slot_end in windows
        ]
        created = self.repo.create_slots(self.db, slots)
        logger.info(f"✅ Created {len(created)} slot(s) for {owner.id} on {data.date}")
        return created

    def delete_slot(self, slot_id: str, owner: Profile) -> dict:
        if not self.repo.get_owned_slot(self.db, slot_id, owner.id):
            raise HTTPException(status_code=404, detail="Slot not found")

        if not self.repo.delete_available_slot(self.db, slot_id, owner.id):
            if self.repo.has_appointment(self.db, slot_id):
                logger.warning(f"⚠️ Refused to delete booked slot {slot_id}")
                raise HTTPException(status_code=409, detail="Cannot delete a slot that has been booked")
            logger.warning(f"⚠️ Refused to delete unavailable slot {slot_id}")
            raise HTTPException(status_code=409, detail="Cannot delete a slot that is not available")

        logger.info(f"🗑️ Deleted slot {slot_id}")
        return {"message": "Slot deleted"}

    def set_availability(self, slot_id: str, is_available: bool, owner: Profile) -> AppointmentSlot:
        """Owner toggle for slots nobody has booked"""
        slot = self.repo.get_owned_slot(self.db, slot_id, owner.id)
        if not slot:
            raise HTTPException(status_code=404, detail="Slot not found")

        if self.repo.has_appointment(self.db, slot.id):
            raise HTTPException(status_code=409, detail="This slot has already been booked")

        slot.is_available = is_available
        self.db.commit()
        self.db.refresh(slot)
        return slot

    def list_owner_slots(self, owner: Profile) -> list[AppointmentSlot]:
        return self.repo.list_owner_slots(self.db, owner.id)

    def list_owner_appointments(self, owner: Profile) -> list[Appointment]:
        return self.repo.list_owner_appointments(self.db, owner.id)

    # ------------------------------------------------------------------
    # Requester side
    # ------------------------------------------------------------------

    def list_open_slots(self, owner_id: str) -> list[AppointmentSlot]:
        """Upcoming unbooked slots of an owner, earliest first"""
        return self.repo.list_open_slots(self.db, owner_id, datetime.now())

    def list_requester_appointments(self, requester: Profile) -> list[Appointment]:
        return self.repo.list_requester_appointments(self.db, requester.id)

    def book(
        self, slot_id: str, requester: Profile, questionnaire_response_id: Optional[str] = None
    ) -> Appointment:
        """
        Reserve a slot. The availability flip is a conditional update, so of two
        concurrent bookings exactly one affects a row; the other gets 409.
        """
        slot = self.repo.get_slot(self.db, slot_id)
        if not slot:
            raise HTTPException(status_code=404, detail="Slot not found")
        if slot.owner_id == requester.id:
            raise HTTPException(status_code=403, detail="You cannot book your own slot")

        response_id = EligibilityResolver(self.db).authorize_action(
            requester.id, slot.owner_id, Action.BOOK, questionnaire_response_id
        )

        duration = slot_duration_minutes(slot)
        appointment = Appointment(
            slot_id=slot.id,
            owner_id=slot.owner_id,
            requester_id=requester.id,
            start_time=slot.start_time,
            end_time=slot.end_time,
            duration_minutes=duration,
            rate_per_hour=slot.rate_per_hour,
            total_amount=appointment_total(slot.rate_per_hour, duration),
            status="pending",
            questionnaire_response_id=response_id,
        )

        try:
            claimed = self.repo.claim_slot(self.db, slot.id)
            if claimed:
                self.db.add(appointment)
                self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"❌ Failed to book slot {slot.id} for {requester.id}")
            raise

        if not claimed:
            self.db.rollback()
            logger.warning(f"⚠️ Slot {slot_id} already taken, booking by {requester.id} refused")
            raise HTTPException(status_code=409, detail="This slot is no longer available")

        self.db.refresh(appointment)
        logger.info(f"✅ Appointment {appointment.id} booked on slot {slot_id} by {requester.id}")

        if self.outbox:
            self.outbox.emit(
                OutboundEvent(
                    kind=EVENT_APPOINTMENT,
                    recipient_id=appointment.owner_id,
                    summary=f"{requester.name or requester.email} booked an appointment",
                    details={
                        "requester_name": requester.name or requester.email,
                        "start_time": appointment.start_time.isoformat(),
                        "duration_minutes": appointment.duration_minutes,
                        "total_amount": appointment.total_amount,
                    },
                )
            )
        return appointment
