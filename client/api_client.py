"""HTTP client for the fitting room endpoints, used by the UI controllers."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from fitroom_app.logging_config import get_logger, log_event
from models.measurements import UserMeasurements

LOGGER = get_logger(__name__)


class ApiError(RuntimeError):
    """Raised when an endpoint answers with ``success: false`` or is unreachable."""


class FitRoomClient:
    """Thin ``requests`` wrapper that unwraps the ``{success, ...}`` envelope."""

    def __init__(
        self,
        base_url: str,
        access_token: Optional[str] = None,
        timeout_seconds: int = 60,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.access_token = access_token
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()

    def _headers(self, authenticated: bool) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if authenticated:
            if not self.access_token:
                raise ApiError("Please sign in to continue")
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def _request(
        self,
        method: str,
        path: str,
        payload: Optional[Dict[str, Any]] = None,
        authenticated: bool = False,
    ) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.request(
                method,
                url,
                json=payload,
                headers=self._headers(authenticated),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            log_event(LOGGER, logging.ERROR, "api_request_failed", path=path, error=str(exc))
            raise ApiError(f"Request to {path} failed: {exc}") from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise ApiError(f"{path} returned a non-JSON response ({response.status_code})") from exc

        if not isinstance(body, dict) or not body.get("success"):
            error = body.get("error") if isinstance(body, dict) else None
            raise ApiError(error or f"{path} failed with status {response.status_code}")
        return body

    def scrape_clothing(self, url: str) -> Dict[str, Any]:
        return self._request("POST", "/scrape-clothing", {"url": url})["data"]

    def analyze_fit(
        self,
        user_photo: str,
        items: List[Dict[str, Any]],
        measurements: UserMeasurements,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "userPhoto": user_photo,
            "clothingData": items[0] if items else None,
            "userData": measurements.to_payload(),
        }
        if len(items) > 1:
            payload["items"] = items
            payload["multiItem"] = True
        return self._request("POST", "/analyze-fit", payload)["analysis"]

    def manage_wardrobe(
        self,
        action: str,
        item_data: Optional[Dict[str, Any]] = None,
        item_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"action": action, "itemData": item_data or {}}
        if item_id:
            payload["itemId"] = item_id
        return self._request("POST", "/wardrobe-management", payload, authenticated=True)

    def get_profile(self) -> Optional[Dict[str, Any]]:
        return self._request("GET", "/profile", authenticated=True).get("profile")

    def save_profile_photo(self, photo_url: Optional[str]) -> Dict[str, Any]:
        return self._request("PUT", "/profile", {"photoUrl": photo_url}, authenticated=True)["profile"]

    def list_analyses(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/fit-analyses", authenticated=True)["analyses"]

    def create_analysis(self, clothing_url: str, preferred_size: str = "M") -> Dict[str, Any]:
        payload = {"clothingUrl": clothing_url, "preferredSize": preferred_size}
        return self._request("POST", "/fit-analyses", payload, authenticated=True)["analysis"]

    def send_magic_link(self, email: str, redirect_to: Optional[str] = None) -> None:
        self._request("POST", "/auth/magic-link", {"email": email, "redirectTo": redirect_to})


__all__ = ["ApiError", "FitRoomClient"]
