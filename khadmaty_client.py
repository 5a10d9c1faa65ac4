"""Khadmaty API client.

A thin wrapper around the Khadmaty REST API built on ``requests``.  It
covers the calls a front end or a script needs:

* :meth:`sign_up`, :meth:`sign_in` - obtain a bearer token.
* :meth:`search_services`, :meth:`get_service` - browse the catalog.
* :meth:`booking_dates`, :meth:`open_slots` - drive the booking wizard.
* :meth:`create_booking`, :meth:`list_bookings`, :meth:`booking_action`.
* :meth:`add_review`, :meth:`service_reviews`.
* :meth:`notifications`, :meth:`mark_notification_read`.

Signing in stores the returned token on the client so later calls are
authenticated.  Any non-2xx response raises :class:`KhadmatyAPIError`
carrying the status code and the server's localized ``detail``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests


logger = logging.getLogger(__name__)


class KhadmatyAPIError(Exception):
    """Raised when the API answers with an error status or cannot be reached."""

    def __init__(self, status: Optional[int], detail: str, code: Optional[str] = None) -> None:
        self.status = status
        self.detail = detail
        self.code = code
        super().__init__(f"{status}: {detail}")


class KhadmatyAPI:
    """Client for the Khadmaty API v1."""

    BOOKING_ACTIONS = ("accept", "reject", "complete", "cancel")

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        language: str = "ar",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the client.

        Args:
            base_url: Server URL, e.g. ``http://localhost:8000``.  The
                ``/api/v1`` prefix is added by the client.
            token: Optional bearer token from a previous sign-in.
            language: Sent as ``Accept-Language`` so error details come
                back in Arabic (``ar``) or English (``en``).
            session: Optional requests session, created when omitted.
        """
        self.base_url = base_url.rstrip("/") + "/api/v1"
        self.token = token
        self.language = language
        self.session = session or requests.Session()
        self.timeout = timeout

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Dict[str, Any] | None = None,
        json_body: Any | None = None,
    ) -> Any:
        """Perform an HTTP request and return the decoded JSON body.

        Returns ``None`` for empty responses such as 204.
        """
        url = f"{self.base_url}{path}"
        headers: Dict[str, str] = {"Accept-Language": self.language}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json_body,
                headers=headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            status = exc.response.status_code if exc.response is not None else None
            detail, code = "", None
            if exc.response is not None:
                try:
                    body = exc.response.json()
                    detail = body.get("detail") or str(body)
                    code = body.get("code")
                except ValueError:
                    detail = exc.response.text
            if not isinstance(detail, str):
                detail = str(detail)
            logger.error("API request failed (%s): %s", status, detail or exc)
            raise KhadmatyAPIError(status, detail or str(exc), code) from exc
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            raise KhadmatyAPIError(None, str(exc)) from exc
        if response.content:
            return response.json()
        return None

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------
    def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: str = "customer",
        phone: Optional[str] = None,
        wilaya: Optional[str] = None,
    ) -> Dict[str, Any]:
        payload = {
            "email": email,
            "password": password,
            "full_name": full_name,
            "role": role,
            "phone": phone,
            "wilaya": wilaya,
        }
        data = self._request("POST", "/auth/signup", json_body=payload)
        self.token = data["access_token"]
        return data

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        data = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        self.token = data["access_token"]
        return data

    def sign_out(self) -> None:
        self._request("POST", "/auth/logout")
        self.token = None

    def profile(self) -> Dict[str, Any]:
        return self._request("GET", "/profiles/me")

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------
    def categories(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/categories/")

    def search_services(self, **filters: Any) -> List[Dict[str, Any]]:
        """Search services; keyword arguments map to the query filters.

        ``None`` values are dropped so callers can pass optional filters
        straight through.
        """
        params = {key: value for key, value in filters.items() if value is not None}
        return self._request("GET", "/services/", params=params)

    def get_service(self, service_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/services/{service_id}")

    # ------------------------------------------------------------------
    # Booking wizard
    # ------------------------------------------------------------------
    def booking_dates(self, service_id: int) -> List[Dict[str, Any]]:
        return self._request("GET", f"/services/{service_id}/booking-dates")

    def open_slots(self, service_id: int, date: str) -> List[Dict[str, Any]]:
        return self._request("GET", f"/services/{service_id}/slots", params={"date": date})

    def create_booking(self, service_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", f"/services/{service_id}/bookings", json_body=payload)

    def list_bookings(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {"status": status} if status else None
        return self._request("GET", "/bookings/mine", params=params)

    def booking_action(self, booking_id: int, action: str) -> Dict[str, Any]:
        """Apply ``accept``, ``reject``, ``complete`` or ``cancel`` to a booking."""
        if action not in self.BOOKING_ACTIONS:
            raise ValueError(f"Unknown booking action: {action}")
        return self._request("POST", f"/bookings/{booking_id}/{action}")

    def whatsapp_link(self, booking_id: int) -> Dict[str, Any]:
        return self._request("GET", f"/bookings/{booking_id}/whatsapp")

    # ------------------------------------------------------------------
    # Reviews and notifications
    # ------------------------------------------------------------------
    def add_review(self, booking_id: int, rating: int, comment: Optional[str] = None) -> Dict[str, Any]:
        return self._request(
            "POST",
            f"/bookings/{booking_id}/review",
            json_body={"rating": rating, "comment": comment},
        )

    def service_reviews(self, service_id: int, wilaya: Optional[str] = None) -> Dict[str, Any]:
        params = {"wilaya": wilaya} if wilaya else None
        return self._request("GET", f"/services/{service_id}/reviews", params=params)

    def notifications(self, unread_only: bool = False) -> List[Dict[str, Any]]:
        params = {"unread_only": "true"} if unread_only else None
        return self._request("GET", "/notifications/", params=params)

    def unread_count(self) -> int:
        return self._request("GET", "/notifications/unread-count")["count"]

    def mark_notification_read(self, notification_id: int) -> Dict[str, Any]:
        return self._request("POST", f"/notifications/{notification_id}/read")
