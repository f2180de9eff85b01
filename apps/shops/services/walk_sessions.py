"""Walk session service - tracking a walk toward a shop."""

import logging
from django.conf import settings
from django.db import transaction
from django.utils import timezone
from typing import Optional
from uuid import UUID

from ..domain import GeoPoint
from ..models import Shop, WalkSession, WalkStatus
from .exceptions import (
    ShopNotFoundError,
    WalkSessionNotFoundError,
    InvalidWalkTransitionError,
)
from .walk_metrics import ARRIVAL_THRESHOLD_M, distance_from, has_arrived, session_calories

logger = logging.getLogger(__name__)


def _arrival_threshold() -> float:
    return getattr(settings, 'SHOPS_ARRIVAL_THRESHOLD_M', ARRIVAL_THRESHOLD_M)


def _lock_active_session(session_id: UUID) -> WalkSession:
    try:
        session = (
            WalkSession.objects
            .select_for_update()
            .select_related('shop')
            .get(id=session_id)
        )
    except WalkSession.DoesNotExist:
        raise WalkSessionNotFoundError(f"Walk session {session_id} not found")

    if session.status != WalkStatus.ACTIVE:
        raise InvalidWalkTransitionError(
            f"Walk session {session_id} is already {session.status}"
        )
    return session


@transaction.atomic
def start_walk(*, shop_id: UUID) -> WalkSession:
    """
    Start a walk toward a shop.

    Raises:
        ShopNotFoundError: If shop doesn't exist
    """
    try:
        shop = Shop.objects.get(id=shop_id)
    except Shop.DoesNotExist:
        raise ShopNotFoundError(f"Shop {shop_id} not found")

    session = WalkSession.objects.create(shop=shop)
    logger.info("Started walk %s toward %s", session.id, shop.name)
    return session


@transaction.atomic
def record_walk_progress(
    *,
    session_id: UUID,
    steps: int,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
) -> WalkSession:
    """
    Record pedometer and location progress of an active walk.

    Steps are cumulative since the walk started. When a position is given,
    the remaining distance is updated and the walk ends as arrived once the
    user is within the arrival threshold of the shop.

    Args:
        session_id: Walk session UUID
        steps: Steps since the walk started
        latitude: Current user latitude
        longitude: Current user longitude

    Returns:
        Updated WalkSession instance

    Raises:
        WalkSessionNotFoundError: If session doesn't exist
        InvalidWalkTransitionError: If the walk already ended
    """
    session = _lock_active_session(session_id)

    session.steps = steps
    session.calories = session_calories(steps)

    if latitude is not None and longitude is not None:
        session.last_latitude = latitude
        session.last_longitude = longitude
        session.remaining_distance = distance_from(
            session.shop, GeoPoint(latitude=latitude, longitude=longitude)
        )
        if has_arrived(session.remaining_distance, _arrival_threshold()):
            session.status = WalkStatus.ARRIVED
            session.ended_at = timezone.now()
            logger.info("Walk %s arrived at %s", session.id, session.shop.name)

    session.save()
    return session


@transaction.atomic
def cancel_walk(*, session_id: UUID) -> WalkSession:
    """
    Stop an active walk before arrival.

    Raises:
        WalkSessionNotFoundError: If session doesn't exist
        InvalidWalkTransitionError: If the walk already ended
    """
    session = _lock_active_session(session_id)
    session.status = WalkStatus.CANCELLED
    session.ended_at = timezone.now()
    session.save(update_fields=['status', 'ended_at'])
    return session
