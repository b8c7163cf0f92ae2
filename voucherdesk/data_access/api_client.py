# voucherdesk/data_access/api_client.py

from typing import Any, Dict, Optional

import requests

from voucherdesk.config import API_BASE_URL, API_TOKEN, TENANT_SLUG, REQUEST_TIMEOUT, DEFAULT_HEADERS
from voucherdesk.constants import MSG_CONNECTION_FAILED
from voucherdesk.business_logic.errors import ApiServerError, ApiTransportError

import logging
logger = logging.getLogger(__name__)


class ApiClient:
    """
    Thin wrapper around a requests.Session bound to the accounting API.

    Every call returns the decoded JSON body. Transport failures become
    ApiTransportError; error statuses and `success: false` bodies become
    ApiServerError carrying the server's own message.
    """

    def __init__(self,
                 base_url: str = API_BASE_URL,
                 token: Optional[str] = API_TOKEN,
                 tenant_slug: Optional[str] = TENANT_SLUG,
                 timeout: float = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.tenant_slug = tenant_slug
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.set_token(token)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def close(self):
        self.session.close()
        logger.debug("API session closed.")

    def set_token(self, token: Optional[str]):
        if token:
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.headers.pop("Authorization", None)

    def build_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = "/" + path
        # every tenant-scoped resource lives under /tenant/{slug}
        if self.tenant_slug and not path.startswith("/tenant/"):
            path = f"/tenant/{self.tenant_slug}{path}"
        return f"{self.base_url}{path}"

    def request(self, method: str, path: str,
                params: Optional[Dict[str, Any]] = None,
                json: Any = None) -> Any:
        url = self.build_url(path)
        logger.debug(f"{method} {url} params={params}")
        try:
            response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error(f"Request {method} {url} failed before a response arrived: {e}")
            raise ApiTransportError(MSG_CONNECTION_FAILED) from e
        return self._handle_response(method, url, response)

    def _handle_response(self, method: str, url: str, response: requests.Response) -> Any:
        body: Any = None
        if response.content:
            try:
                body = response.json()
            except ValueError:
                logger.warning(f"{method} {url} returned a non-JSON body (status {response.status_code}).")

        if not response.ok or (isinstance(body, dict) and body.get("success") is False):
            message = body.get("message") if isinstance(body, dict) else None
            errors = body.get("errors") if isinstance(body, dict) else None
            logger.warning(f"{method} {url} rejected with status {response.status_code}: {message}")
            raise ApiServerError(message=message or None, status_code=response.status_code,
                                 errors=errors if isinstance(errors, dict) else None, payload=body)

        logger.debug(f"{method} {url} -> {response.status_code}")
        return body

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.request("GET", path, params=params)

    def post(self, path: str, json: Any = None) -> Any:
        return self.request("POST", path, json=json)

    def put(self, path: str, json: Any = None) -> Any:
        return self.request("PUT", path, json=json)

    def delete(self, path: str) -> Any:
        return self.request("DELETE", path)
