from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.orm import Session

from app.core.auth import Principal
from app.core.db import get_db
from app.core.permissions import require
from app.models.presence import Presence
from app.schemas.enums import Action
from app.schemas.presence import StatusRequest, StatusResponse

router = APIRouter()


@router.post("", response_model=StatusResponse)
def set_status(
    payload: StatusRequest,
    db: Session = Depends(get_db),
    user: Principal = Depends(require(Action.share_location)),
):
    row = db.get(Presence, user.id)
    if row:
        row.is_sharing = payload.is_sharing
    else:
        row = Presence(user_id=user.id, is_sharing=payload.is_sharing)
        db.add(row)

    db.commit()
    logger.info(f"Presence updated | user={user.id} is_sharing={payload.is_sharing}")
    return StatusResponse(success=True, is_sharing=row.is_sharing)
