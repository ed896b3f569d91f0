# carwash/services/ratings.py
"""
Rating links and customer ratings.

A link is a signed token (see carwash.tokens) backed by a ServiceRatingLink
row. Links are single-use and expire after RATING_LINK_TTL_HOURS; issuing a
new link for a visit revokes the previous unused one.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple

from sqlalchemy import func, select, update
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import RATING_BASE_URL
from ..crud import Repository
from ..database import atomic
from ..errors import ConflictError, DuplicateError, ExpiredLinkError, InvalidLinkError
from ..tokens import create_rating_token, decode_rating_token, link_expiry, new_token_id
from ..utils import utcnow

logger = logging.getLogger(__name__)

visits = Repository(models.PendingService, "Pending service")
ratings = Repository(models.ServiceRating, "Rating")


def rating_url(token: str) -> str:
    return f"{RATING_BASE_URL}/rate/{token}"


def issue_link(db: Session, visit: models.PendingService, now: Optional[datetime] = None) -> Tuple[str, str]:
    """Add a fresh link for `visit`; the caller owns the transaction."""
    now = now or utcnow()
    db.execute(
        update(models.ServiceRatingLink)
        .where(
            models.ServiceRatingLink.service_id == visit.id,
            models.ServiceRatingLink.used_at.is_(None),
            models.ServiceRatingLink.revoked_at.is_(None),
        )
        .values(revoked_at=now)
    )
    link = models.ServiceRatingLink(
        token_id=new_token_id(),
        service_id=visit.id,
        created_at=now,
        expires_at=link_expiry(now),
    )
    db.add(link)
    db.flush()
    token = create_rating_token(visit.id, link.token_id, link.expires_at)
    return token, rating_url(token)


def generate_link(db: Session, service_id: int) -> Tuple[str, str]:
    visit = visits.get(db, service_id)
    if visit.status != models.COMPLETED:
        raise ConflictError(f"Service {service_id} is not completed; rating links are issued after completion")
    with atomic(db):
        token, url = issue_link(db, visit)
    logger.info(f"Issued rating link for service {service_id}")
    return token, url


def _resolve_link(db: Session, token: str) -> models.ServiceRatingLink:
    claims = decode_rating_token(token)
    link = db.scalar(
        select(models.ServiceRatingLink).where(models.ServiceRatingLink.token_id == claims["jti"])
    )
    if link is None or link.service_id != claims["service_id"] or link.revoked_at is not None:
        raise InvalidLinkError()
    if link.used_at is not None:
        raise ExpiredLinkError("Rating link was already used")
    if link.expires_at <= utcnow():
        raise ExpiredLinkError("Rating link has expired")
    return link


def validate_link(db: Session, token: str) -> schemas.RatingLinkValidation:
    link = _resolve_link(db, token)
    vehicle = link.service.vehicle
    return schemas.RatingLinkValidation(
        serviceId=link.service_id,
        vehicleMake=vehicle.make,
        vehicleModel=vehicle.model,
        licensePlate=vehicle.license_plate,
    )


def submit_rating(db: Session, service_id: int, payload: schemas.RatingIn) -> models.ServiceRating:
    visit = visits.get(db, service_id)
    if visit.status != models.COMPLETED:
        raise ConflictError(f"Service {service_id} is not completed yet")
    if visit.rating is not None:
        raise DuplicateError(f"Service {service_id} was already rated")

    now = utcnow()
    with atomic(db):
        if payload.token:
            link = _resolve_link(db, payload.token)
            if link.service_id != service_id:
                raise InvalidLinkError("Rating link belongs to another service")
        # token gelmese de açık linkler kullanılmış sayılır
        db.execute(
            update(models.ServiceRatingLink)
            .where(
                models.ServiceRatingLink.service_id == service_id,
                models.ServiceRatingLink.used_at.is_(None),
                models.ServiceRatingLink.revoked_at.is_(None),
            )
            .values(used_at=now)
        )
        rating = models.ServiceRating(
            service_id=service_id,
            wait_time_rating=payload.wait_time_rating,
            staff_friendliness_rating=payload.staff_friendliness_rating,
            service_quality_rating=payload.service_quality_rating,
            customer_comment=payload.customer_comment,
        )
        db.add(rating)
    db.refresh(rating)
    logger.info(f"Rating stored for service {service_id}")
    return rating


def ratings_for_service(db: Session, service_id: int) -> List[models.ServiceRating]:
    visits.get(db, service_id)
    return ratings.list(db, models.ServiceRating.service_id == service_id)


def rating_report(db: Session) -> schemas.RatingReport:
    R = models.ServiceRating
    row = db.execute(
        select(
            func.avg(R.wait_time_rating),
            func.avg(R.staff_friendliness_rating),
            func.avg(R.service_quality_rating),
            func.count(R.id),
        )
    ).one()
    return schemas.RatingReport(
        avg_wait_time=round(row[0] or 0, 2),
        avg_staff_friendliness=round(row[1] or 0, 2),
        avg_service_quality=round(row[2] or 0, 2),
        total_ratings=row[3],
    )
