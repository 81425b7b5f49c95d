from __future__ import annotations

import base64
import json
import logging
import threading
from dataclasses import dataclass
from typing import Any, Mapping, Optional
from urllib.parse import quote

import requests
from requests import Response
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from .config import ClientCredentials, ShippingAPIConfig
from .context import RequestContext
from .errors import (
    AuthenticationError,
    DecodingError,
    LabelRetrievalError,
    NetworkError,
    OrderCreationError,
    RequestConstructionError,
    RequestTimeoutError,
    SerializationError,
)

logger = logging.getLogger(__name__)

TOKEN_PATH = "oauth/accesstoken"
ORDERS_PATH = "shipping/v1/orders"
ITEM_LABEL_PATH = "shipping/v1/items/{order_id}/label"


@dataclass(frozen=True)
class AccessToken:
    access_token: str
    token_type: str
    expires_in: int


class ShippingAPIClient:
    """Client for the parcel-shipping REST API.

    Calls must follow the order authenticate -> create_order -> get_item_label.
    The bearer token is held in a lock-guarded cell and is never refreshed
    automatically; ``expires_in`` is reported back to the caller only.
    """

    def __init__(
        self,
        credentials: ClientCredentials,
        config: Optional[ShippingAPIConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self._credentials = credentials
        self._config = config or ShippingAPIConfig()
        self._token = ""
        self._token_lock = threading.Lock()
        self._session = session or requests.Session()
        self._session.headers.update({"User-Agent": self._config.user_agent})
        verify_setting: bool | str
        if self._config.ca_bundle_path:
            verify_setting = self._config.ca_bundle_path
        else:
            verify_setting = self._config.verify_ssl
        self._session.verify = verify_setting
        if verify_setting is False:
            urllib3.disable_warnings(InsecureRequestWarning)

    def __enter__(self) -> "ShippingAPIClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @property
    def access_token(self) -> str:
        with self._token_lock:
            return self._token

    def close(self) -> None:
        self._session.close()

    def authenticate(self, context: Optional[RequestContext] = None) -> AccessToken:
        """Exchange the client credentials for a bearer token and store it."""
        raw = f"{self._credentials.client_id}:{self._credentials.client_secret}".encode("utf-8")
        headers = {
            "Authorization": f"Basic {base64.b64encode(raw).decode('ascii')}",
            "Content-Type": "application/x-www-form-urlencoded",
        }
        with self._send(context, "POST", TOKEN_PATH, headers=headers) as response:
            if response.status_code != 200:
                raise AuthenticationError(response.status_code, response.text)
            payload = _decode_json(response)

        token = payload.get("access_token")
        if not isinstance(token, str) or not token:
            raise DecodingError("token response is missing 'access_token'")
        try:
            expires_in = int(payload.get("expires_in") or 0)
        except (TypeError, ValueError) as exc:
            raise DecodingError(f"token response has invalid 'expires_in': {payload.get('expires_in')!r}") from exc

        with self._token_lock:
            self._token = token
        logger.info("Obtained access token (expires in %ss)", expires_in)
        return AccessToken(
            access_token=token,
            token_type=str(payload.get("token_type") or ""),
            expires_in=expires_in,
        )

    def create_order(self, order_data: Mapping[str, Any], context: Optional[RequestContext] = None) -> str:
        """Submit an order document and return the identifier assigned by the service."""
        try:
            body = json.dumps(dict(order_data), allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise SerializationError(f"order data is not JSON serializable: {exc}") from exc

        headers = {
            "Authorization": self._bearer_header(),
            "Content-Type": "application/json",
        }
        with self._send(context, "POST", ORDERS_PATH, headers=headers, data=body) as response:
            if response.status_code != 201:
                raise OrderCreationError(response.status_code, response.text)
            payload = _decode_json(response)

        order_id = payload.get("orderId")
        if not isinstance(order_id, str) or not order_id:
            raise DecodingError("order response is missing 'orderId'")
        logger.debug("Created order %s", order_id)
        return order_id

    def get_item_label(self, order_id: str, context: Optional[RequestContext] = None) -> bytes:
        """Download the label document for ``order_id`` as raw bytes."""
        if not isinstance(order_id, str) or not order_id.strip():
            raise RequestConstructionError("order id must be a non-empty string")

        headers = {"Authorization": self._bearer_header()}
        path = ITEM_LABEL_PATH.format(order_id=quote(order_id, safe=""))
        with self._send(context, "GET", path, headers=headers) as response:
            if response.status_code != 200:
                raise LabelRetrievalError(response.status_code, response.text)
            label = response.content

        logger.info("Fetched label for order %s (%d bytes)", order_id, len(label))
        return label

    def _bearer_header(self) -> str:
        token = self.access_token
        if not token:
            raise RequestConstructionError("client is not authenticated; call authenticate() first")
        return f"Bearer {token}"

    def _send(self, context: Optional[RequestContext], method: str, path: str, **kwargs: Any) -> Response:
        context = context or RequestContext.background()
        context.check()

        url = self._build_url(path)
        logger.debug("%s %s", method, url)
        try:
            response = self._session.request(method, url, timeout=self._request_timeout(context), **kwargs)
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
            requests.exceptions.InvalidHeader,
        ) as exc:
            raise RequestConstructionError(f"invalid request for {url!r}: {exc}") from exc
        except requests.Timeout as exc:
            if context.expired:
                raise RequestTimeoutError(f"{method} {url} exceeded the context deadline") from exc
            raise NetworkError(f"{method} {url} timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise NetworkError(f"{method} {url} failed: {exc}") from exc

        if context.cancelled or context.expired:
            response.close()
            context.check()
        return response

    def _request_timeout(self, context: RequestContext) -> float:
        remaining = context.remaining()
        if remaining is None:
            return self._config.timeout_seconds
        if remaining <= 0:
            raise RequestTimeoutError("request context deadline exceeded")
        return min(self._config.timeout_seconds, remaining)

    def _build_url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}/{path.lstrip('/')}"


def _decode_json(response: Response) -> dict:
    try:
        payload = response.json()
    except ValueError as exc:
        raise DecodingError(f"response body is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise DecodingError(f"expected a JSON object, got {type(payload).__name__}")
    return payload
