from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import httpx
from loguru import logger

from app.schemas.enums import NotificationType
from app.schemas.presence import PresenceEntry
from app.client.positioning import PositionFix


class TrackerClient:
    """
    Thin HTTP wrapper over the /v1 API, used by the student and admin policies.
    Errors surface as httpx.HTTPError; callers decide whether to swallow them.
    """

    def __init__(
        self,
        base_url: str = "",
        token: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: float = 15,
    ):
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)
        self.token = token

    def _headers(self) -> Dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        resp = self._http.request(method, path, headers=self._headers(), **kwargs)
        resp.raise_for_status()
        return resp.json()

    def close(self) -> None:
        self._http.close()

    # ---------- auth ----------

    def login(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/v1/auth/login", json={"email": email, "password": password})
        self.token = data["access_token"]
        logger.debug(f"Logged in | user={data['user']['id']}")
        return data

    # ---------- student ----------

    def send_location(self, fix: PositionFix) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/v1/location",
            json={"lat": fix.lat, "lng": fix.lng, "accuracy": fix.accuracy},
        )

    def set_sharing(self, is_sharing: bool) -> Dict[str, Any]:
        return self._request("POST", "/v1/status", json={"is_sharing": is_sharing})

    def fetch_notifications(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/v1/notifications")

    # ---------- staff ----------

    def fetch_locations(self) -> List[PresenceEntry]:
        rows = self._request("GET", "/v1/location")
        return [PresenceEntry.model_validate(r) for r in rows]

    def fetch_weather_alerts(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/v1/weather/alert")

    def broadcast(
        self,
        user_ids: Union[str, List[str]],
        title: str,
        message: str,
        notification_type: NotificationType = NotificationType.info,
    ) -> Dict[str, Any]:
        return self._request(
            "POST",
            "/v1/notifications",
            json={
                "user_ids": user_ids,
                "title": title,
                "message": message,
                "type": NotificationType(notification_type).value,
            },
        )
