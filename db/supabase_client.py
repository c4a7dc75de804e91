"""
Supabase database client for the salon calendar documents.
Handles salon configuration, staff availability, services and appointments.

Tables:
=======
- salon_config: one row (id = settings.salon_config_id), `data` jsonb holding
  the SalonConfig document. Saved by full overwrite.
- staff_availability: one row per staff member (`staff_id` primary key),
  `data` jsonb holding the StaffAvailability document. Saved by merge.
- services: the service catalog.
- appointments: confirmed bookings.

Double booking:
===============
Slots are computed from a snapshot, so two clients may pick the same slot.
`create_appointment` re-checks overlaps right before inserting, and the
table must carry an exclusion constraint so the database rejects the
losing insert of a concurrent pair:

CREATE EXTENSION IF NOT EXISTS btree_gist;
ALTER TABLE appointments ADD CONSTRAINT appointments_no_overlap
EXCLUDE USING gist (
    staff_id WITH =,
    tsrange("start", "end", '[)') WITH &&
);
"""

from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Tuple

from postgrest.exceptions import APIError
from pydantic import ValidationError as PydanticValidationError
from supabase import Client as SupabaseClientType
from supabase import create_client

from config import settings
from models.appointment import Appointment, AppointmentCreate
from models.schedule import SalonConfig, StaffAvailability
from models.service import Service
from utils.datetime_utils import local_now, overlaps, to_iso_string
from utils.exceptions import (
    BookingCreationError,
    ConfigurationError,
    DatabaseError,
    SlotNotAvailableError,
)
from utils.logging_config import get_logger

logger = get_logger(__name__)

# Postgres exclusion / unique violations raised by a concurrent booking
CONFLICT_CODES = {"23P01", "23505"}


class SupabaseClient:
    """
    Supabase database client wrapper.

    Salon configuration and the service catalog are read on every booking
    flow, so they are kept in a small in-memory cache invalidated on save.
    """

    def __init__(self):
        self.client: SupabaseClientType = create_client(
            settings.supabase_url, settings.supabase_key
        )

        # Format: {cache_key: (data, expiry_time)}
        self._cache: Dict[str, Tuple[Any, datetime]] = {}
        self._cache_ttl = timedelta(minutes=settings.cache_ttl_minutes)

    # ========== Cache Helpers ==========

    def _get_from_cache(self, key: str) -> Optional[Any]:
        """Get value from cache if not expired."""
        if key not in self._cache:
            return None

        data, expiry = self._cache[key]
        if local_now() > expiry:
            del self._cache[key]
            return None

        return data

    def _set_cache(self, key: str, value: Any) -> None:
        self._cache[key] = (value, local_now() + self._cache_ttl)

    def _clear_cache(self, pattern: Optional[str] = None) -> None:
        """Clear cache entries matching pattern, or all if pattern is None."""
        if pattern is None:
            self._cache.clear()
        else:
            for key in [k for k in self._cache if pattern in k]:
                del self._cache[key]

    # ========== Salon Configuration ==========

    async def get_salon_config(self) -> Optional[SalonConfig]:
        """
        Get the salon configuration document.

        Returns:
            SalonConfig, or None when the salon has not saved one yet

        Raises:
            ConfigurationError: If the stored document is malformed
        """
        cache_key = "salon_config"
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        try:
            response = (
                self.client.table("salon_config")
                .select("*")
                .eq("id", settings.salon_config_id)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to get salon config: {e}") from e

        if not response.data:
            return None

        config = self._parse_salon_config(response.data[0].get("data") or {})
        self._set_cache(cache_key, config)
        return config

    async def save_salon_config(self, config: SalonConfig) -> SalonConfig:
        """Overwrite the salon configuration document."""
        now = local_now()
        document = config.model_copy(update={"updated_at": now}).to_document()
        try:
            response = (
                self.client.table("salon_config")
                .upsert(
                    {
                        "id": settings.salon_config_id,
                        "data": document,
                        "updated_at": to_iso_string(now),
                    }
                )
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to save salon config: {e}") from e

        if not response.data:
            raise DatabaseError("Failed to save salon config: no data returned")

        self._clear_cache("salon_config")
        logger.info("Salon configuration saved")
        return self._parse_salon_config(response.data[0].get("data") or document)

    # ========== Staff Availability ==========

    async def get_staff_availability(self, staff_id: str) -> Optional[StaffAvailability]:
        """
        Get one staff member's availability document.

        Raises:
            ConfigurationError: If the stored document is malformed
        """
        try:
            response = (
                self.client.table("staff_availability")
                .select("*")
                .eq("staff_id", staff_id)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to get staff availability: {e}") from e

        if not response.data:
            return None

        return self._parse_staff_availability(staff_id, response.data[0].get("data") or {})

    async def save_staff_availability(
        self, availability: StaffAvailability
    ) -> StaffAvailability:
        """
        Save a staff member's availability, merged into the stored document.

        Top-level fields present in `availability` replace the stored ones;
        stored fields it does not carry are kept.
        """
        staff_id = availability.staff_id
        try:
            existing = (
                self.client.table("staff_availability")
                .select("*")
                .eq("staff_id", staff_id)
                .execute()
            )
            merged = dict(existing.data[0].get("data") or {}) if existing.data else {}
            merged.update(availability.to_document())

            response = (
                self.client.table("staff_availability")
                .upsert(
                    {
                        "staff_id": staff_id,
                        "data": merged,
                        "updated_at": to_iso_string(local_now()),
                    }
                )
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to save staff availability: {e}") from e

        if not response.data:
            raise DatabaseError("Failed to save staff availability: no data returned")

        logger.info(f"Availability saved for staff {staff_id}")
        return self._parse_staff_availability(staff_id, response.data[0].get("data") or merged)

    # ========== Services ==========

    async def get_all_services(self) -> List[Service]:
        cache_key = "services:all"
        cached = self._get_from_cache(cache_key)
        if cached is not None:
            return cached

        try:
            response = self.client.table("services").select("*").order("title").execute()
        except Exception as e:
            raise DatabaseError(f"Failed to get services: {e}") from e

        services = [Service(**item) for item in response.data]
        self._set_cache(cache_key, services)
        return services

    async def get_service(self, service_id: str) -> Optional[Service]:
        try:
            response = (
                self.client.table("services").select("*").eq("id", service_id).execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to get service: {e}") from e

        if not response.data:
            return None
        return Service(**response.data[0])

    # ========== Appointments ==========

    async def get_appointments_for_staff(
        self, staff_id: str, day: Optional[date] = None
    ) -> List[Appointment]:
        """
        Get a staff member's appointments, optionally for a single day.

        Raises:
            ConfigurationError: If a stored appointment is malformed
        """
        try:
            query = self.client.table("appointments").select("*").eq("staff_id", staff_id)
            if day is not None:
                query = query.gte("start", day.isoformat()).lt(
                    "start", (day + timedelta(days=1)).isoformat()
                )
            response = query.order("start", desc=False).execute()
        except Exception as e:
            raise DatabaseError(f"Failed to get appointments: {e}") from e

        return [self._parse_appointment(item) for item in response.data]

    async def get_appointment_by_id(self, appointment_id: str) -> Optional[Appointment]:
        try:
            response = (
                self.client.table("appointments")
                .select("*")
                .eq("id", appointment_id)
                .execute()
            )
        except Exception as e:
            raise DatabaseError(f"Failed to get appointment: {e}") from e

        if not response.data:
            return None
        return self._parse_appointment(response.data[0])

    async def create_appointment(self, request: AppointmentCreate) -> Appointment:
        """
        Insert an appointment after re-checking it against the stored ones.

        Raises:
            SlotNotAvailableError: If the slot was taken in the meantime
            BookingCreationError: If the insert fails for another reason
        """
        existing = await self.get_appointments_for_staff(
            request.staff_id, request.start.date()
        )
        for appointment in existing:
            if overlaps(request.start, request.end, appointment.start_at, appointment.end_at):
                raise SlotNotAvailableError(
                    f"Slot {to_iso_string(request.start)} overlaps appointment {appointment.id}"
                )

        row = request.to_row()
        row["created_at"] = to_iso_string(local_now())
        try:
            response = self.client.table("appointments").insert(row).execute()
        except APIError as e:
            if e.code in CONFLICT_CODES:
                raise SlotNotAvailableError(
                    f"Slot {row['start']} was booked concurrently"
                ) from e
            raise BookingCreationError(f"Failed to create appointment: {e}") from e
        except Exception as e:
            raise BookingCreationError(f"Failed to create appointment: {e}") from e

        if not response.data:
            raise BookingCreationError("Failed to create appointment: no data returned")

        return self._parse_appointment(response.data[0])

    async def delete_appointment(self, appointment_id: str) -> bool:
        try:
            response = (
                self.client.table("appointments")
                .delete()
                .eq("id", appointment_id)
                .execute()
            )
            return len(response.data) > 0
        except Exception as e:
            raise DatabaseError(f"Failed to delete appointment: {e}") from e

    # ========== Helper Methods ==========

    def _parse_salon_config(self, document: dict) -> SalonConfig:
        try:
            return SalonConfig.model_validate(document)
        except PydanticValidationError as e:
            logger.error(f"Malformed salon config document: {e}")
            raise ConfigurationError(f"Malformed salon config: {e}") from e

    def _parse_staff_availability(self, staff_id: str, document: dict) -> StaffAvailability:
        document = {**document, "staffId": staff_id}
        document.pop("staff_id", None)
        try:
            return StaffAvailability.model_validate(document)
        except PydanticValidationError as e:
            logger.error(f"Malformed availability document for staff {staff_id}: {e}")
            raise ConfigurationError(f"Malformed staff availability: {e}") from e

    def _parse_appointment(self, item: dict) -> Appointment:
        try:
            return Appointment.model_validate(item)
        except PydanticValidationError as e:
            logger.error(f"Malformed appointment row {item.get('id')}: {e}")
            raise ConfigurationError(f"Malformed appointment: {e}") from e


# Global database client instance
_db_client: Optional[SupabaseClient] = None


def get_db_client() -> SupabaseClient:
    """Get or create database client instance."""
    global _db_client
    if _db_client is None:
        _db_client = SupabaseClient()
    return _db_client
