from fastapi import APIRouter, Depends

from app.core.auth import Principal
from app.core.permissions import require
from app.schemas.enums import Action
from app.schemas.weather import WeatherAlertCandidate
from app.services.weather import check_weather_alerts

router = APIRouter()


@router.get("/alert", response_model=list[WeatherAlertCandidate])
def weather_alert(user: Principal = Depends(require(Action.check_weather))):
    return check_weather_alerts()
