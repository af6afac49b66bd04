from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

import requests
from loguru import logger
from pydantic import ValidationError

from app.core.config import WEATHER_LAT, WEATHER_LNG
from app.core.tracking_config import WEATHER_KEYWORDS
from app.schemas.weather import WeatherAlertCandidate

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"


def matches_keywords(event: str | None, description: str | None, keywords: Iterable[str] = WEATHER_KEYWORDS) -> bool:
    event = (event or "").lower()
    description = (description or "").lower()
    return any(k in event or k in description for k in keywords)


def filter_alerts(raw_alerts: Iterable[Dict[str, Any]]) -> List[WeatherAlertCandidate]:
    out: List[WeatherAlertCandidate] = []

    for raw in raw_alerts:
        if not isinstance(raw, Mapping):
            logger.warning(f"Skipping malformed weather alert | item={raw!r:.80}")
            continue

        if not matches_keywords(raw.get("event"), raw.get("description")):
            continue

        try:
            out.append(
                WeatherAlertCandidate(
                    sender_name=raw.get("sender_name"),
                    event=raw.get("event"),
                    start=raw.get("start"),
                    end=raw.get("end"),
                    description=raw.get("description"),
                    tags=raw.get("tags") or [],
                )
            )
        except ValidationError as e:
            logger.warning(f"Skipping malformed weather alert | event={raw.get('event')} error={e}")

    return out


def fetch_raw_alerts(lat: float = WEATHER_LAT, lng: float = WEATHER_LNG) -> List[Dict[str, Any]]:
    resp = requests.get(
        OPEN_METEO_URL,
        params={
            "latitude": lat,
            "longitude": lng,
            "current": "weather_code",
            "hourly": "visibility",
            "alerts": "true",
            "timezone": "Asia/Manila",
        },
        timeout=10,
    )

    if resp.status_code != 200:
        logger.warning(f"Weather feed returned HTTP {resp.status_code}")
        return []

    data = resp.json()
    return data.get("alerts") or []


def check_weather_alerts() -> List[WeatherAlertCandidate]:
    """Keyword-matching alerts near the monitored region; [] on any failure."""
    try:
        return filter_alerts(fetch_raw_alerts())
    except (requests.RequestException, ValueError, AttributeError) as e:
        logger.error(f"Failed to check weather alerts: {e}")
        return []
