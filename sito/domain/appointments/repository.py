"""Appointment repository - Database operations for slots and appointments"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Appointment, AppointmentSlot, Product


class AppointmentRepository:
    """Repository for slot and appointment database operations"""

    @staticmethod
    def create_slots(db: Session, slots: list[AppointmentSlot]) -> list[AppointmentSlot]:
        db.add_all(slots)
        db.commit()
        for slot in slots:
            db.refresh(slot)
        return slots

    @staticmethod
    def get_slot(db: Session, slot_id: str) -> Optional[AppointmentSlot]:
        return db.query(AppointmentSlot).filter(AppointmentSlot.id == slot_id).first()

    @staticmethod
    def get_owned_slot(db: Session, slot_id: str, owner_id: str) -> Optional[AppointmentSlot]:
        return (
            db.query(AppointmentSlot)
            .filter(AppointmentSlot.id == slot_id, AppointmentSlot.owner_id == owner_id)
            .first()
        )

    @staticmethod
    def claim_slot(db: Session, slot_id: str) -> bool:
        """
        Flip is_available to False only if it is still True. Does not commit.
        Returns False when another booking got there first.
        """
        updated = (
            db.query(AppointmentSlot)
            .filter(AppointmentSlot.id == slot_id, AppointmentSlot.is_available.is_(True))
            .update({AppointmentSlot.is_available: False}, synchronize_session=False)
        )
        return updated == 1

    @staticmethod
    def delete_available_slot(db: Session, slot_id: str, owner_id: str) -> bool:
        """Delete the slot only while it is unbooked. Commits on success."""
        deleted = (
            db.query(AppointmentSlot)
            .filter(
                AppointmentSlot.id == slot_id,
                AppointmentSlot.owner_id == owner_id,
                AppointmentSlot.is_available.is_(True),
            )
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted == 1

    @staticmethod
    def has_appointment(db: Session, slot_id: str) -> bool:
        return db.query(Appointment.id).filter(Appointment.slot_id == slot_id).first() is not None

    @staticmethod
    def list_open_slots(db: Session, owner_id: str, now: datetime) -> list[AppointmentSlot]:
        return (
            db.query(AppointmentSlot)
            .filter(
                AppointmentSlot.owner_id == owner_id,
                AppointmentSlot.is_available.is_(True),
                AppointmentSlot.start_time >= now,
            )
            .order_by(AppointmentSlot.start_time.asc())
            .all()
        )

    @staticmethod
    def list_owner_slots(db: Session, owner_id: str) -> list[AppointmentSlot]:
        return (
            db.query(AppointmentSlot)
            .filter(AppointmentSlot.owner_id == owner_id)
            .order_by(AppointmentSlot.start_time.asc())
            .all()
        )

    @staticmethod
    def list_owner_appointments(db: Session, owner_id: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.owner_id == owner_id)
            .order_by(Appointment.start_time.asc())
            .all()
        )

    @staticmethod
    def list_requester_appointments(db: Session, requester_id: str) -> list[Appointment]:
        return (
            db.query(Appointment)
            .filter(Appointment.requester_id == requester_id)
            .order_by(Appointment.start_time.asc())
            .all()
        )

    @staticmethod
    def owns_product(db: Session, product_id: str, owner_id: str) -> bool:
        return (
            db.query(Product.id)
            .filter(Product.id == product_id, Product.owner_id == owner_id)
            .first()
            is not None
        )
