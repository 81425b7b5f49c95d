from __future__ import annotations

from typing import Optional

_BODY_SNIPPET_LIMIT = 512


class ShippingAPIError(RuntimeError):
    """Base class for every failure raised by the shipping client."""


class RequestConstructionError(ShippingAPIError, ValueError):
    """Raised when a request cannot be built (bad URL, empty id, no token)."""


class NetworkError(ShippingAPIError):
    """Raised when the transport fails before a response is received."""


class CancellationError(ShippingAPIError):
    """Raised when the request context was cancelled."""


class RequestTimeoutError(ShippingAPIError, TimeoutError):
    """Raised when the request context deadline elapsed."""


class DecodingError(ShippingAPIError):
    """Raised when a response body is not the JSON document we expect."""


class SerializationError(ShippingAPIError):
    """Raised when an order document cannot be encoded as JSON."""


class APIStatusError(ShippingAPIError):
    """Raised when the service answers with an unexpected status code."""

    operation = "request"

    def __init__(self, status_code: int, body: Optional[str] = None):
        self.status_code = status_code
        self.body = body or ""
        message = f"{self.operation} failed with status code {status_code}"
        snippet = self.body.strip()
        if snippet:
            if len(snippet) > _BODY_SNIPPET_LIMIT:
                snippet = f"{snippet[:_BODY_SNIPPET_LIMIT]}..."
            message = f"{message}; response body: {snippet}"
        super().__init__(message)


class AuthenticationError(APIStatusError):
    operation = "authentication"


class OrderCreationError(APIStatusError):
    operation = "order creation"


class LabelRetrievalError(APIStatusError):
    operation = "label retrieval"
