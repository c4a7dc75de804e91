"""
Booking service: loads a fresh snapshot from the store, then runs the
availability rules on it.

The rules themselves are pure (see the `availability` package); this is
the only layer that reads the clock and talks to the database.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, List, Optional, Tuple

from availability import (
    classify_day,
    compute_available_slots,
    day_grid,
    selection_block_reason,
)
from config import settings
from db import SupabaseClient, get_db_client
from models.appointment import Appointment, AppointmentCreate
from models.schedule import SalonConfig, StaffAvailability
from models.slot import BlockReason, CellStatus, DayStatus
from utils.datetime_utils import format_time_of_day, local_now, minute_of_day
from utils.exceptions import (
    AppointmentNotFoundError,
    ConfigurationError,
    ServiceNotFoundError,
    SlotNotAvailableError,
    ValidationError,
)
from utils.logging_config import get_logger

logger = get_logger(__name__, log_file="booking.log")


@dataclass
class AvailabilitySnapshot:
    """Everything the rules need for one staff member on one day."""

    salon_config: Optional[SalonConfig] = None
    staff_availability: Optional[StaffAvailability] = None
    appointments: List[Appointment] = field(default_factory=list)
    # False when part of the data could not be read; nothing is bookable then
    complete: bool = True


class BookingService:
    """Fetch-then-compute boundary between the store and the availability rules."""

    def __init__(
        self,
        db: Optional[SupabaseClient] = None,
        clock: Callable[[], datetime] = local_now,
        step_minutes: Optional[int] = None,
    ):
        self._db = db
        self.clock = clock
        self.step_minutes = step_minutes or settings.slot_step_minutes

    @property
    def db(self) -> SupabaseClient:
        if self._db is None:
            self._db = get_db_client()
        return self._db

    # ========== Snapshot ==========

    async def _salon_config(self) -> Optional[SalonConfig]:
        try:
            return await self.db.get_salon_config()
        except ConfigurationError as e:
            logger.warning(f"Salon config unusable, treating salon as closed: {e}")
            return None

    async def _staff_availability(self, staff_id: str) -> Optional[StaffAvailability]:
        try:
            return await self.db.get_staff_availability(staff_id)
        except ConfigurationError as e:
            logger.warning(f"Availability of {staff_id} unusable, treating as off: {e}")
            return None

    async def load_snapshot(self, staff_id: Optional[str], day: date) -> AvailabilitySnapshot:
        """Read salon config, staff availability and that day's appointments."""
        snapshot = AvailabilitySnapshot(salon_config=await self._salon_config())
        if not staff_id:
            return snapshot

        snapshot.staff_availability = await self._staff_availability(staff_id)
        try:
            snapshot.appointments = await self.db.get_appointments_for_staff(staff_id, day)
        except ConfigurationError as e:
            logger.warning(f"Appointments of {staff_id} on {day} unreadable: {e}")
            snapshot.complete = False
        return snapshot

    # ========== Slots ==========

    async def get_available_slots(
        self,
        day: date,
        staff_id: str,
        duration_minutes: int,
        now: Optional[datetime] = None,
    ) -> List[str]:
        snapshot = await self.load_snapshot(staff_id, day)
        if not snapshot.complete:
            return []
        return compute_available_slots(
            day,
            staff_id,
            duration_minutes,
            snapshot.salon_config,
            snapshot.staff_availability,
            snapshot.appointments,
            now=now or self.clock(),
            step_minutes=self.step_minutes,
        )

    async def get_available_slots_for_service(
        self,
        day: date,
        staff_id: str,
        service_id: str,
        now: Optional[datetime] = None,
    ) -> List[str]:
        """
        Slots for a catalog service.

        Raises:
            ServiceNotFoundError: If the service does not exist
        """
        service = await self.db.get_service(service_id)
        if service is None:
            raise ServiceNotFoundError(f"Service {service_id} not found")
        return await self.get_available_slots(day, staff_id, service.duration, now)

    # ========== Calendar ==========

    async def check_interval(
        self,
        start: datetime,
        end: datetime,
        staff_filter: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Optional[BlockReason]:
        """Reason the interval cannot be selected, None when it can."""
        snapshot = await self.load_snapshot(staff_filter, start.date())
        return selection_block_reason(
            start,
            end,
            snapshot.salon_config,
            snapshot.staff_availability,
            staff_filter,
            now=now or self.clock(),
        )

    async def calendar_day(
        self, day: date, staff_filter: Optional[str] = None
    ) -> Tuple[DayStatus, List[Tuple[str, CellStatus]]]:
        snapshot = await self.load_snapshot(staff_filter, day)
        status = classify_day(
            day, snapshot.salon_config, snapshot.staff_availability, staff_filter
        )
        cells = day_grid(
            day,
            snapshot.salon_config,
            snapshot.staff_availability,
            staff_filter,
            step_minutes=self.step_minutes,
        )
        return status, cells

    # ========== Booking ==========

    async def book_appointment(
        self, request: AppointmentCreate, now: Optional[datetime] = None
    ) -> Appointment:
        """
        Book an appointment if its start is still offered.

        Raises:
            ValidationError: If the start is in the past
            SlotNotAvailableError: If the slot is not (or no longer) available
        """
        now = now or self.clock()
        if request.start <= now:
            raise ValidationError("Cannot book an appointment in the past")

        day = request.start.date()
        start_label = format_time_of_day(minute_of_day(request.start))
        slots = await self.get_available_slots(
            day, request.staff_id, request.service_duration, now
        )
        if start_label not in slots:
            logger.info(
                f"Refused booking for {request.staff_id} on {day} at {start_label}: not offered"
            )
            raise SlotNotAvailableError(
                f"{day} {start_label} is not available for {request.staff_id}"
            )

        appointment = await self.db.create_appointment(request)
        logger.info(
            f"Booked appointment {appointment.id} for {request.staff_id} "
            f"on {day} at {start_label} ({request.service_duration} min)"
        )
        return appointment

    async def cancel_appointment(self, appointment_id: str) -> Appointment:
        """
        Cancel a booked appointment, freeing its slot.

        Raises:
            AppointmentNotFoundError: If the appointment does not exist
        """
        appointment = await self.db.get_appointment_by_id(appointment_id)
        if appointment is None:
            raise AppointmentNotFoundError(f"Appointment {appointment_id} not found")

        await self.db.delete_appointment(appointment_id)
        logger.info(f"Cancelled appointment {appointment_id} of {appointment.staff_id}")
        return appointment

    # ========== Configuration ==========

    async def save_salon_config(self, config: SalonConfig) -> SalonConfig:
        return await self.db.save_salon_config(config)

    async def save_staff_availability(
        self, availability: StaffAvailability
    ) -> StaffAvailability:
        return await self.db.save_staff_availability(availability)
