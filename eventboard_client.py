"""EventBoard API client.

A thin wrapper over the EventBoard REST API built on ``requests``.  It
covers authentication and every event operation:

* :meth:`register`, :meth:`login`, :meth:`me`
* :meth:`list_events`, :meth:`get_event`, :meth:`my_events`
* :meth:`create_event`, :meth:`update_event`, :meth:`delete_event`
* :meth:`attend_event`, :meth:`leave_event`

Every method returns a ``(data, error)`` tuple.  On success ``data``
holds the parsed JSON envelope and ``error`` is ``None``; on failure
``data`` is ``None`` and ``error`` is a dictionary with
``status_code``, ``message`` and, for validation failures, ``errors``.

A token obtained from :meth:`register` or :meth:`login` is remembered
and sent as ``Authorization: Bearer <token>`` on later calls.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]


class EventBoardClient:
    """Client for the EventBoard API."""

    def __init__(
        self,
        *,
        base_url: str,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Server URL without the ``/api`` suffix, e.g.
                ``http://localhost:5000``.
            token: Optional bearer token from an earlier login.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
            timeout: Per‑request timeout in seconds.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(
        self, method: str, path: str, *, params: Dict[str, Any] | None = None,
        json_body: Any | None = None
    ) -> Result:
        """Perform an HTTP request against ``/api<path>``."""
        url = f"{self.base_url}/api{path}"
        headers: Dict[str, str] = {}
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
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            return None, self._http_error(exc)
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "message": str(exc)}

    @staticmethod
    def _http_error(exc: requests.HTTPError) -> Dict[str, Any]:
        response = exc.response
        status = response.status_code if response is not None else None
        error: Dict[str, Any] = {"status_code": status, "message": ""}
        if response is not None:
            try:
                body = response.json()
            except ValueError:
                error["message"] = response.text
            else:
                if isinstance(body, dict):
                    error["message"] = body.get("message") or body.get("detail") or ""
                    if body.get("errors"):
                        error["errors"] = body["errors"]
        if not error["message"]:
            error["message"] = str(exc)
        logger.error("API request failed (%s): %s", status, error["message"])
        return error

    def _store_token(self, data: Optional[Dict[str, Any]]) -> None:
        if data and data.get("token"):
            self.token = data["token"]

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------
    def register(self, name: str, email: str, password: str) -> Result:
        data, error = self._request(
            "POST", "/auth/register", json_body={"name": name, "email": email, "password": password}
        )
        self._store_token(data)
        return data, error

    def login(self, email: str, password: str) -> Result:
        data, error = self._request("POST", "/auth/login", json_body={"email": email, "password": password})
        self._store_token(data)
        return data, error

    def me(self) -> Result:
        return self._request("GET", "/auth/me")

    # ------------------------------------------------------------------
    # Event operations
    # ------------------------------------------------------------------
    def list_events(
        self,
        *,
        search: Optional[str] = None,
        category: Optional[str] = None,
        page: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Result:
        """Retrieve one page of events.

        Only the filters that are set are sent as query parameters.
        """
        params = {
            key: value
            for key, value in {"search": search, "category": category, "page": page, "limit": limit}.items()
            if value is not None
        }
        return self._request("GET", "/events", params=params or None)

    def get_event(self, event_id: Any) -> Result:
        return self._request("GET", f"/events/{event_id}")

    def my_events(self) -> Result:
        return self._request("GET", "/events/user/my-events")

    def create_event(self, payload: Dict[str, Any]) -> Result:
        return self._request("POST", "/events", json_body=payload)

    def update_event(self, event_id: Any, payload: Dict[str, Any]) -> Result:
        return self._request("PUT", f"/events/{event_id}", json_body=payload)

    def delete_event(self, event_id: Any) -> Result:
        return self._request("DELETE", f"/events/{event_id}")

    def attend_event(self, event_id: Any) -> Result:
        return self._request("POST", f"/events/{event_id}/attend")

    def leave_event(self, event_id: Any) -> Result:
        return self._request("DELETE", f"/events/{event_id}/attend")
