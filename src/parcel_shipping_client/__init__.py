"""Client for a parcel-shipping provider's REST API: token, order, label."""

from .client import AccessToken, ShippingAPIClient
from .config import AppConfig, ClientCredentials, ConfigError, ShippingAPIConfig, load_config
from .context import RequestContext
from .errors import (
    APIStatusError,
    AuthenticationError,
    CancellationError,
    DecodingError,
    LabelRetrievalError,
    NetworkError,
    OrderCreationError,
    RequestConstructionError,
    RequestTimeoutError,
    SerializationError,
    ShippingAPIError,
)
from .orders import OrderRequest, ReceiverAddress, ReceiverName, ShipmentDetails, sample_order

__all__ = [
    "AccessToken",
    "APIStatusError",
    "AppConfig",
    "AuthenticationError",
    "CancellationError",
    "ClientCredentials",
    "ConfigError",
    "DecodingError",
    "LabelRetrievalError",
    "NetworkError",
    "OrderCreationError",
    "OrderRequest",
    "ReceiverAddress",
    "ReceiverName",
    "RequestConstructionError",
    "RequestContext",
    "RequestTimeoutError",
    "SerializationError",
    "ShipmentDetails",
    "ShippingAPIClient",
    "ShippingAPIConfig",
    "ShippingAPIError",
    "load_config",
    "sample_order",
]
