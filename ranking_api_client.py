"""Character ranking admin API client.

A thin wrapper around the HTTP endpoints of the ranking admin API,
used by scripts and by anything that wants to drive the admin from
Python instead of the browser.  The client uses the ``requests``
library internally.

Every high‑level method returns a tuple ``(data, error)``.  On success
``data`` holds the decoded JSON body and ``error`` is ``None``.  On
failure ``data`` is ``None`` and ``error`` is a dictionary with the keys
``status_code``, ``error`` (the classification reported by the server,
e.g. ``"not_found"``) and ``message``.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)

Result = Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]


class RankingAPIClient:
    """Client for the ``/api/v1/characters`` endpoints."""

    def __init__(
        self,
        *,
        base_url: str,
        timeout: float = 15,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialise the API client.

        Args:
            base_url: Base URL of the server, e.g. ``http://localhost:3000``.
            timeout: Seconds to wait for each response.
            session: Optional requests session.  If not supplied a
                session will be created automatically.
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Low level HTTP helpers
    # ------------------------------------------------------------------
    def _request(self, method: str, path: str, *, params: Dict[str, Any] | None = None) -> Result:
        url = f"{self.base_url}/api/v1{path}"
        try:
            logger.debug("Sending %s request to %s", method, url)
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            response.raise_for_status()
            if response.content:
                return response.json(), None
            return None, None
        except requests.HTTPError as exc:
            response = exc.response
            status = response.status_code if response is not None else None
            kind = None
            message = ""
            if response is not None:
                try:
                    err_json = response.json()
                    kind = err_json.get("error")
                    message = err_json.get("detail") or err_json.get("message") or str(err_json)
                except ValueError:
                    message = response.text
            if not message:
                message = str(exc)
            logger.error("API request failed (%s): %s", status, message)
            return None, {"status_code": status, "error": kind, "message": message}
        except requests.RequestException as exc:
            logger.error("API request failed: %s", exc)
            return None, {"status_code": None, "error": None, "message": str(exc)}

    # ------------------------------------------------------------------
    # Character operations
    # ------------------------------------------------------------------
    def fetch_ranked(self, page: int = 1, page_size: int = 10) -> Result:
        """Retrieve one page of the ranked listing.

        Returns:
            A tuple ``(page, error)`` where ``page`` has the keys
            ``records``, ``totalCount``, ``currentPage``, ``totalPages``
            and ``hasMore``.
        """
        return self._request("GET", "/characters/ranked", params={"page": page, "pageSize": page_size})

    def search(self, keyword: str) -> Result:
        """Search characters by user ID or nickname."""
        return self._request("GET", "/characters/search", params={"keyword": keyword})

    def delete(self, user_id: str) -> Result:
        """Permanently delete the character identified by ``user_id``."""
        return self._request("DELETE", f"/characters/{quote(user_id, safe='')}")
