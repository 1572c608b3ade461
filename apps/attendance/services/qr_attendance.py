"""
QR code clock-in.

A staff member is issued a signed code that expires. Scanning it applies
a clock action to their attendance record:

    qr_data   = base64(JSON {staffId, timestamp, expiresAt, version})
    signature = HMAC-SHA256(QR_CODE_SECRET, qr_data), hex

Codes are single use; every scan attempt is logged whether it succeeds
or not.
"""

import base64
import binascii
import hashlib
import hmac
import json
import logging
import math
from datetime import timedelta
from typing import Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.db.models import QuerySet
from django.utils import timezone

from apps.staff.models import Staff
from ..models import QRAttendanceLog, QRCode
from .exceptions import (
    DuplicateAttendanceError,
    InvalidClockActionError,
    LocationOutOfRangeError,
    QRAttendanceError,
    QRCodeExpiredError,
    QRCodeInvalidError,
)
from .time_tracking import clock_action

logger = logging.getLogger(__name__)

QR_VERSION = '1.0'
EARTH_RADIUS_METERS = 6371e3


def sign(qr_data: str) -> str:
    return hmac.new(
        settings.QR_CODE_SECRET.encode(), qr_data.encode(), hashlib.sha256
    ).hexdigest()


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@transaction.atomic
def generate_qr_code(
    *,
    staff_id: UUID,
    expires_in_minutes: Optional[int] = None,
    created_by=None,
) -> QRCode:
    """Issue a new code for a staff member; earlier active codes are revoked."""
    now = timezone.now()
    expires_at = now + timedelta(minutes=expires_in_minutes or settings.QR_CODE_EXPIRY_MINUTES)

    QRCode.objects.filter(staff_id=staff_id, is_active=True).update(is_active=False)

    payload = {
        'staffId': str(staff_id),
        'timestamp': now.isoformat(),
        'expiresAt': expires_at.isoformat(),
        'version': QR_VERSION,
    }
    qr_data = base64.b64encode(json.dumps(payload).encode()).decode()

    qr_code = QRCode.objects.create(
        staff_id=staff_id,
        qr_data=qr_data,
        signature=sign(qr_data),
        expires_at=expires_at,
        created_by=created_by,
    )
    logger.info('QR code issued for staff %s, expires %s', staff_id, expires_at)
    return qr_code


def validate_qr_code(*, qr_data: str, signature: str) -> QRCode:
    """
    Check a scanned code.

    An expired code is deactivated before the error is raised.

    Raises:
        QRCodeInvalidError: Unknown, inactive, badly signed or undecodable code,
            or the staff member is inactive
        QRCodeExpiredError: The code is past its expiry
    """
    qr_code = QRCode.objects.select_related('staff').filter(qr_data=qr_data, is_active=True).first()
    if qr_code is None:
        raise QRCodeInvalidError('QR code is not valid')

    if timezone.now() > qr_code.expires_at:
        QRCode.objects.filter(id=qr_code.id).update(is_active=False)
        raise QRCodeExpiredError('QR code has expired')

    if not hmac.compare_digest(sign(qr_data), signature or ''):
        raise QRCodeInvalidError('QR code signature does not match')

    try:
        payload = json.loads(base64.b64decode(qr_data).decode())
    except (binascii.Error, UnicodeDecodeError, ValueError):
        raise QRCodeInvalidError('QR code payload cannot be decoded')

    if payload.get('staffId') != str(qr_code.staff_id):
        raise QRCodeInvalidError('QR code does not belong to this staff member')
    if not qr_code.staff.is_active:
        raise QRCodeInvalidError('Staff member is not active')

    return qr_code


def _check_location(location: Optional[dict]) -> None:
    if not location:
        return
    try:
        latitude = float(location['latitude'])
        longitude = float(location['longitude'])
    except (KeyError, TypeError, ValueError):
        raise LocationOutOfRangeError('Location data is incomplete')

    distance = haversine_distance(
        latitude, longitude, settings.VENUE_LATITUDE, settings.VENUE_LONGITUDE
    )
    if distance > settings.QR_LOCATION_RADIUS_METERS:
        raise LocationOutOfRangeError(f"Scanned {int(distance)}m from the venue")


def _check_duplicate(staff_id: UUID, action: str) -> None:
    if QRAttendanceLog.objects.filter(
        staff_id=staff_id,
        action_type=action,
        success=True,
        created_at__date=timezone.localdate(),
    ).exists():
        raise DuplicateAttendanceError(f"{action} was already recorded today")


def record_qr_attendance(
    *,
    qr_data: str,
    signature: str,
    action: str,
    location: Optional[dict] = None,
    device_info: Optional[dict] = None,
):
    """
    Apply a clock action from a scanned code.

    Returns the updated attendance record. Failures are logged and
    re-raised.
    """
    qr_code = None
    try:
        qr_code = validate_qr_code(qr_data=qr_data, signature=signature)
        with transaction.atomic():
            _check_location(location)
            _check_duplicate(qr_code.staff_id, action)
            try:
                record = clock_action(staff_id=qr_code.staff_id, action=action)
            except InvalidClockActionError as e:
                raise QRAttendanceError(str(e)) from e
            QRCode.objects.filter(id=qr_code.id).update(is_active=False)
            QRAttendanceLog.objects.create(
                staff_id=qr_code.staff_id,
                qr_code=qr_code,
                action_type=action,
                location_data=location,
                device_info=device_info,
                success=True,
            )
    except QRAttendanceError as e:
        QRAttendanceLog.objects.create(
            staff_id=qr_code.staff_id if qr_code else None,
            qr_code=qr_code,
            action_type=action,
            location_data=location,
            device_info=device_info,
            success=False,
            error_message=str(e)[:255],
        )
        logger.warning('QR %s rejected: %s', action, e)
        raise

    logger.info('QR %s recorded for staff %s', action, qr_code.staff_id)
    return record


def qr_stats() -> dict:
    today_logs = QRAttendanceLog.objects.filter(created_at__date=timezone.localdate())
    total = today_logs.count()
    succeeded = today_logs.filter(success=True).count()
    return {
        'today_scans': total,
        'successful_scans': succeeded,
        'failed_scans': total - succeeded,
        'active_codes': QRCode.objects.filter(is_active=True, expires_at__gt=timezone.now()).count(),
        'active_staff': Staff.objects.filter(is_active=True).count(),
    }


def qr_history(*, staff_id: Optional[UUID] = None, success: Optional[bool] = None) -> QuerySet:
    qs = QRAttendanceLog.objects.select_related('staff', 'qr_code')
    if staff_id:
        qs = qs.filter(staff_id=staff_id)
    if success is not None:
        qs = qs.filter(success=success)
    return qs


def active_qr_code(*, staff_id: UUID) -> Optional[QRCode]:
    return QRCode.objects.filter(
        staff_id=staff_id, is_active=True, expires_at__gt=timezone.now()
    ).first()
