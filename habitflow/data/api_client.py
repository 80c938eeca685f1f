import logging
from typing import Any

import httpx
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from habitflow.errors import NotAuthenticated, RemoteRejection
from habitflow.settings import get_settings

logger = logging.getLogger(__name__)

_TOKEN_GETTER = None
_SESSION = None
_ASYNC_TRANSPORT = None


def _build_session(read_retries):
    session = requests.Session()
    # Mutations are never retried.
    retry = Retry(
        total=read_retries,
        backoff_factor=0.5,
        status_forcelist=(502, 503, 504),
        allowed_methods=("GET",),
        raise_on_status=False,
    )
    adapter = HTTPAdapter(max_retries=retry, pool_connections=10, pool_maxsize=10)
    session.mount("https://", adapter)
    session.mount("http://", adapter)
    return session


def configure(token_getter=None, session=None, async_transport=None):
    global _TOKEN_GETTER, _SESSION, _ASYNC_TRANSPORT
    if token_getter is not None:
        _TOKEN_GETTER = token_getter
    if session is not None:
        _SESSION = session
    if async_transport is not None:
        _ASYNC_TRANSPORT = async_transport


def reset():
    global _TOKEN_GETTER, _SESSION, _ASYNC_TRANSPORT
    _TOKEN_GETTER = None
    _SESSION = None
    _ASYNC_TRANSPORT = None


def _session():
    global _SESSION
    if _SESSION is None:
        _SESSION = _build_session(get_settings().read_retries)
    return _SESSION


def api_base_url():
    return (get_settings().api_base_url or "").rstrip("/")


def bearer_token():
    token = _TOKEN_GETTER() if _TOKEN_GETTER else None
    return token or get_settings().api_token or ""


def _prepare(path, auth):
    base = api_base_url()
    if not base:
        raise RuntimeError("HABITFLOW_API_BASE_URL not configured")
    headers = {"Accept": "application/json"}
    if auth:
        token = bearer_token()
        if not token:
            raise NotAuthenticated("Not logged in", status_code=None)
        headers["Authorization"] = f"Bearer {token}"
    return f"{base}{path}", headers


def _detail(response):
    try:
        return response.json()
    except ValueError:
        return response.text


def _raise_for_status(method, path, status_code, reason, detail):
    message = f"API error {status_code} {reason}: {detail}"
    logger.debug("%s %s failed: %s", method, path, message)
    if status_code in (401, 403):
        raise NotAuthenticated(message, status_code=status_code, detail=detail)
    raise RemoteRejection(message, status_code=status_code, detail=detail)


def request(method: str, path: str, params: dict | None = None, json: Any = None, auth: bool = True, timeout: float | None = None) -> Any:
    url, headers = _prepare(path, auth)
    timeout = timeout or get_settings().request_timeout
    logger.debug("%s %s", method, url)
    try:
        response = _session().request(method, url, params=params, json=json, headers=headers, timeout=timeout)
    except requests.RequestException as exc:
        raise RemoteRejection(f"{method} {path} failed: {exc}") from exc
    if not response.ok:
        _raise_for_status(method, path, response.status_code, response.reason, _detail(response))
    if response.status_code == 204 or not response.content:
        return None
    return response.json()


async def async_request(method: str, path: str, params: dict | None = None, json: Any = None, auth: bool = True, timeout: float | None = None) -> Any:
    url, headers = _prepare(path, auth)
    timeout = timeout or get_settings().request_timeout
    logger.debug("%s %s", method, url)
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=_ASYNC_TRANSPORT) as client:
            response = await client.request(method, url, params=params, json=json, headers=headers)
    except httpx.HTTPError as exc:
        raise RemoteRejection(f"{method} {path} failed: {exc}") from exc
    if response.is_error:
        _raise_for_status(method, path, response.status_code, response.reason_phrase, _detail(response))
    if response.status_code == 204 or not response.content:
        return None
    return response.json()
