from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import schemas
from ..deps import get_db
from ..services import ratings

links_router = APIRouter(prefix="/service-rating-links", tags=["service-rating-links"])
router = APIRouter(prefix="/service-ratings", tags=["service-ratings"])


@links_router.post("/{service_id}/generate-link", response_model=schemas.RatingLinkOut)
def generate_link(service_id: int, db: Session = Depends(get_db)):
    token, url = ratings.generate_link(db, service_id)
    return schemas.RatingLinkOut(token=token, ratingUrl=url)


@links_router.get("/validate/{token}", response_model=schemas.RatingLinkValidation)
def validate_link(token: str, db: Session = Depends(get_db)):
    return ratings.validate_link(db, token)


@router.get("/report", response_model=schemas.RatingReport)
def rating_report(db: Session = Depends(get_db)):
    return ratings.rating_report(db)


@router.post("/{service_id}", response_model=schemas.RatingRead, status_code=201)
def rate_service(service_id: int, payload: schemas.RatingIn, db: Session = Depends(get_db)):
    return ratings.submit_rating(db, service_id, payload)


@router.get("/{service_id}/ratings", response_model=List[schemas.RatingRead])
def service_ratings(service_id: int, db: Session = Depends(get_db)):
    return ratings.ratings_for_service(db, service_id)
