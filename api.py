"""
HTTP API for the salon calendar and booking front ends.

Endpoints:
- GET  /health
- GET  /availability?date=YYYY-MM-DD&staff_id=...&duration=N (or service_id=...)
- POST /slots/check            {"start", "end", "staff_id"?}
- GET  /calendar/day?date=YYYY-MM-DD&staff_id=...
- POST /appointments           booking request
- DELETE /appointments/{id}     cancellation
"""

import time
from datetime import date, datetime
from typing import Optional

from aiohttp import web
from aiohttp.web import Request, Response
from pydantic import ValidationError as PydanticValidationError

from config import settings
from models.appointment import AppointmentCreate
from services.booking import BookingService
from utils.datetime_utils import parse_date, parse_iso_datetime
from utils.exceptions import (
    AppointmentNotFoundError,
    DatabaseError,
    ServiceNotFoundError,
    SlotNotAvailableError,
    ValidationError,
)
from utils.logging_config import get_logger
from utils.validation import validate_date_string

logger = get_logger(__name__, log_file="api.log")

MAX_REQUEST_BODY_SIZE = 64 * 1024

SERVICE_KEY = web.AppKey("booking_service", BookingService)

_started_at = time.time()


def _error(status: int, error: str, message: str) -> Response:
    return web.json_response(
        {"status": "error", "error": error, "message": message}, status=status
    )


def _service(request: Request) -> BookingService:
    return request.app[SERVICE_KEY]


def _required_param(request: Request, name: str) -> str:
    value = request.query.get(name, "").strip()
    if not value:
        raise ValidationError(f"Missing query parameter: {name}")
    return value


def _date_param(request: Request) -> date:
    value = _required_param(request, "date")
    if not validate_date_string(value):
        raise ValidationError(f"Invalid date: {value!r}, expected YYYY-MM-DD")
    return parse_date(value)


def _parse_duration_param(value: str) -> int:
    try:
        duration = int(value)
    except ValueError as e:
        raise ValidationError(f"Invalid duration: {value!r}") from e
    if duration <= 0:
        raise ValidationError("duration must be a positive number of minutes")
    return duration


def _parse_instant(value: Optional[str], name: str) -> datetime:
    if not value:
        raise ValidationError(f"Missing field: {name}")
    try:
        return parse_iso_datetime(value)
    except ValueError as e:
        raise ValidationError(str(e)) from e


async def _read_json(request: Request) -> dict:
    if request.content_length and request.content_length > MAX_REQUEST_BODY_SIZE:
        raise ValidationError("Request body too large")
    try:
        payload = await request.json()
    except ValueError as e:
        raise ValidationError("Body must be valid JSON") from e
    if not isinstance(payload, dict):
        raise ValidationError("Body must be a JSON object")
    return payload


@web.middleware
async def error_middleware(request: Request, handler):
    """Map domain errors to JSON responses."""
    try:
        return await handler(request)
    except ValidationError as e:
        logger.info(f"Bad request on {request.path}: {e}")
        return _error(400, "validation_failed", str(e))
    except (ServiceNotFoundError, AppointmentNotFoundError) as e:
        return _error(404, "not_found", str(e))
    except SlotNotAvailableError as e:
        logger.info(f"Slot conflict on {request.path}: {e}")
        return _error(409, "slot_unavailable", "Slot no longer available, please retry")
    except DatabaseError as e:
        logger.error(f"Store failure on {request.path}: {e}", exc_info=True)
        return _error(503, "store_unavailable", "Calendar data is temporarily unavailable")


@web.middleware
async def security_headers_middleware(request: Request, handler):
    response = await handler(request)

    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Cache-Control"] = "no-store"
    if settings.is_production:
        response.headers["Strict-Transport-Security"] = (
            "max-age=31536000; includeSubDomains"
        )
    if settings.frontend_origin:
        response.headers["Access-Control-Allow-Origin"] = settings.frontend_origin

    return response


async def health_check(request: Request) -> Response:
    return web.json_response(
        {
            "status": "ok",
            "service": "salon-availability",
            "salon": settings.salon_name,
            "environment": settings.environment,
            "uptime_hours": round((time.time() - _started_at) / 3600, 2),
            "slot_step_minutes": _service(request).step_minutes,
        }
    )


async def availability_handler(request: Request) -> Response:
    day = _date_param(request)
    staff_id = _required_param(request, "staff_id")
    service = _service(request)

    service_id = request.query.get("service_id")
    if service_id:
        slots = await service.get_available_slots_for_service(day, staff_id, service_id)
        duration = None
    else:
        duration = _parse_duration_param(_required_param(request, "duration"))
        slots = await service.get_available_slots(day, staff_id, duration)

    return web.json_response(
        {
            "date": day.isoformat(),
            "staff_id": staff_id,
            "service_id": service_id,
            "duration": duration,
            "slots": slots,
        }
    )


async def check_slot_handler(request: Request) -> Response:
    payload = await _read_json(request)
    start = _parse_instant(payload.get("start"), "start")
    end = _parse_instant(payload.get("end"), "end")
    staff_id = payload.get("staff_id") or payload.get("staffId")

    reason = await _service(request).check_interval(start, end, staff_filter=staff_id)
    body = {"selectable": reason is None}
    if reason is not None:
        body["reason"] = reason.value
    return web.json_response(body)


async def calendar_day_handler(request: Request) -> Response:
    day = _date_param(request)
    staff_id = request.query.get("staff_id") or None

    status, cells = await _service(request).calendar_day(day, staff_filter=staff_id)
    return web.json_response(
        {
            "date": day.isoformat(),
            "staff_id": staff_id,
            "status": status.value,
            "cells": [{"time": t, "status": s.value} for t, s in cells],
        }
    )


async def create_appointment_handler(request: Request) -> Response:
    payload = await _read_json(request)
    try:
        booking = AppointmentCreate.model_validate(payload)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid appointment: {e.errors()[0]['msg']}") from e

    appointment = await _service(request).book_appointment(booking)
    return web.json_response(
        appointment.model_dump(by_alias=True, mode="json", exclude_none=True),
        status=201,
    )


async def cancel_appointment_handler(request: Request) -> Response:
    appointment_id = request.match_info["appointment_id"]
    appointment = await _service(request).cancel_appointment(appointment_id)
    return web.json_response(
        {"status": "cancelled", "id": appointment_id, "staffId": appointment.staff_id}
    )


def create_app(service: Optional[BookingService] = None) -> web.Application:
    """
    Create aiohttp application with middleware and routes.

    Args:
        service: Booking service to use; a store-backed one by default
    """
    app = web.Application(
        middlewares=[security_headers_middleware, error_middleware],
        client_max_size=MAX_REQUEST_BODY_SIZE,
    )
    app[SERVICE_KEY] = service or BookingService()

    app.router.add_get("/health", health_check)
    app.router.add_get("/availability", availability_handler)
    app.router.add_post("/slots/check", check_slot_handler)
    app.router.add_get("/calendar/day", calendar_day_handler)
    app.router.add_post("/appointments", create_appointment_handler)
    app.router.add_delete("/appointments/{appointment_id}", cancel_appointment_handler)

    return app


if __name__ == "__main__":
    settings.validate_all_required()
    logger.info(f"Starting availability API on {settings.host}:{settings.port}")
    web.run_app(create_app(), host=settings.host, port=settings.port)
