from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.db import get_db
from app.core.permissions import require
from app.models.location_log import LocationLog
from app.schemas.enums import Action
from app.schemas.presence import LocationLogOut, LocationUpdateRequest, PresenceEntry
from app.services.aggregation import aggregate_presence

router = APIRouter()


# ------------------------------------------------------------------
# SAMPLE INGEST
# ------------------------------------------------------------------

@router.post("", response_model=LocationLogOut)
def post_location(
    payload: LocationUpdateRequest,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(Action.share_location)),
):
    log = LocationLog(
        user_id=user.id,
        lat=payload.lat,
        lng=payload.lng,
        accuracy=payload.accuracy,
    )
    db.add(log)
    db.commit()
    db.refresh(log)

    logger.debug(f"Location stored | user={user.id} lat={log.lat} lng={log.lng}")
    return log


# ------------------------------------------------------------------
# LIVE VIEW
# ------------------------------------------------------------------

@router.get("", response_model=list[PresenceEntry])
def get_locations(
    db: Session = Depends(get_db),
    user: Principal = Depends(require(Action.view_locations)),
):
    return aggregate_presence(db)
