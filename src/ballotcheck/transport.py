"""
JSON-over-HTTPS transport for control requests.

One POST per verification attempt, fixed timeout, no retry.
  2xx      -> parsed JSON body (must be an object)
  non-2xx  -> ServerError(body["error"]) or MalformedResponseError(status)
  network  -> TransportError
"""
from __future__ import annotations

from typing import Any, Dict, Optional

import logging

import requests

from ballotcheck.config import DEFAULT_TIMEOUT_S
from ballotcheck.errors import MalformedResponseError, ServerError, TransportError


class RequestsTransport:
    def __init__(self, *, timeout_s: float = DEFAULT_TIMEOUT_S, session: Optional[requests.Session] = None) -> None:
        self.timeout_s = timeout_s
        self.session = session

    def post_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        logging.getLogger(__name__).debug("POST %s", url)
        try:
            if self.session is not None:
                response = self._post(self.session, url, payload)
            else:
                with requests.Session() as session:
                    response = self._post(session, url, payload)
        except requests.exceptions.Timeout as e:
            raise TransportError(f"timed out after {self.timeout_s:g}s") from e
        except requests.exceptions.ConnectionError as e:
            raise TransportError("connection failed") from e
        except requests.exceptions.RequestException as e:
            raise TransportError(e.__class__.__name__) from e

        return _read_body(response)

    def _post(self, session: requests.Session, url: str, payload: Dict[str, Any]) -> requests.Response:
        return session.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=self.timeout_s,
        )


def _read_body(response: requests.Response) -> Dict[str, Any]:
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = None

    if 200 <= status < 300:
        if not isinstance(body, dict):
            raise MalformedResponseError(detail="response body is not a JSON object")
        return body

    if isinstance(body, dict) and isinstance(body.get("error"), str) and body["error"]:
        raise ServerError(body["error"], status)
    raise MalformedResponseError(status=status)
