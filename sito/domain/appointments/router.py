"""Appointment router - FastAPI endpoints for slots and bookings"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Profile
from ...services.notification_service import NotificationOutbox, get_outbox
from .schemas import (
    AppointmentResponse,
    BookingCreate,
    SlotAvailabilityUpdate,
    SlotGenerate,
    SlotResponse,
)
from .service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def get_appointment_service(
    db: Session = Depends(get_db), outbox: NotificationOutbox = Depends(get_outbox)
) -> AppointmentService:
    """Dependency injection for AppointmentService"""
    return AppointmentService(db, outbox)


@router.post("/slots", response_model=list[SlotResponse], status_code=201)
async def generate_slots(
    data: SlotGenerate,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Create back-to-back slots for one day's time window"""
    return service.generate_slots(data, current_user)


@router.get("/slots/mine", response_model=list[SlotResponse])
async def list_my_slots(
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.list_owner_slots(current_user)


@router.get("/slots/owner/{owner_id}", response_model=list[SlotResponse])
async def list_open_slots(
    owner_id: str,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.list_open_slots(owner_id)


@router.patch("/slots/{slot_id}", response_model=SlotResponse)
async def set_slot_availability(
    slot_id: str,
    data: SlotAvailabilityUpdate,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.set_availability(slot_id, data.is_available, current_user)


@router.delete("/slots/{slot_id}")
async def delete_slot(
    slot_id: str,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.delete_slot(slot_id, current_user)


@router.post("/slots/{slot_id}/book", response_model=AppointmentResponse, status_code=201)
async def book_slot(
    slot_id: str,
    data: BookingCreate,
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    return service.book(slot_id, current_user, data.questionnaire_response_id)


@router.get("/mine", response_model=list[AppointmentResponse])
async def list_my_appointments(
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments the current user has booked"""
    return service.list_requester_appointments(current_user)


@router.get("/received", response_model=list[AppointmentResponse])
async def list_received_appointments(
    current_user: Profile = Depends(get_current_user),
    service: AppointmentService = Depends(get_appointment_service),
):
    """Appointments booked on the current user's slots"""
    return service.list_owner_appointments(current_user)
