from __future__ import annotations

import json
import logging
from typing import Any
from urllib.parse import quote

import requests


logger = logging.getLogger(__name__)


class ApiError(Exception):
    """
    Any failed backend call: transport error, non-2xx status or a body that
    is not valid JSON. `detail` holds the server-supplied message, if any.
    """

    def __init__(self, message: str, *, status_code: int | None = None, detail: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.detail = detail


def segment(value) -> str:
    return quote(str(value), safe="")


def _extract_detail(response: requests.Response) -> str:
    text = (response.text or "").strip()
    if not text:
        return ""
    try:
        payload = json.loads(text)
    except ValueError:
        return text
    if isinstance(payload, str):
        return payload.strip()
    if isinstance(payload, dict):
        for key in ("message", "detail", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    return ""


class ApiClient:
    def __init__(self, base_url: str, *, timeout: float | None = None, session: requests.Session | None = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.setdefault("Content-Type", "application/json")

    def request(self, method: str, path: str, *, params: dict | None = None, json: Any = None):
        url = f"{self.base_url}{path}"
        logger.debug("%s %s params=%s", method, url, params)
        try:
            response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            raise ApiError(f"{method} {path} failed: {exc}") from exc

        if not response.ok:
            detail = _extract_detail(response)
            logger.warning("%s %s returned %s: %s", method, url, response.status_code, detail)
            raise ApiError(
                f"{method} {path} returned {response.status_code}",
                status_code=response.status_code,
                detail=detail,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.warning("%s %s returned a malformed body", method, url)
            raise ApiError(f"{method} {path} returned a malformed body", status_code=response.status_code) from exc

    def get(self, path: str, **kwargs):
        return self.request("GET", path, **kwargs)

    def post(self, path: str, **kwargs):
        return self.request("POST", path, **kwargs)

    def put(self, path: str, **kwargs):
        return self.request("PUT", path, **kwargs)

    def delete(self, path: str, **kwargs):
        return self.request("DELETE", path, **kwargs)


def records(payload, what: str) -> list[dict]:
    """A list response must be a JSON array of objects; an empty body counts as an empty list."""
    if payload is None:
        return []
    if not isinstance(payload, list) or not all(isinstance(item, dict) for item in payload):
        raise ApiError(f"{what} returned a malformed body")
    return payload


def record(payload, what: str) -> dict:
    if not isinstance(payload, dict):
        raise ApiError(f"{what} returned a malformed body")
    return payload
