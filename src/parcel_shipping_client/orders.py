from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ReceiverName:
    first_name: str
    last_name: str


@dataclass(frozen=True)
class ReceiverAddress:
    street: str
    house_no: str
    postal_code: str
    city: str
    country: str


@dataclass(frozen=True)
class ShipmentDetails:
    weight_in_grams: int
    length: int
    width: int
    height: int


@dataclass(frozen=True)
class OrderRequest:
    """Typed convenience layer over the order document.

    The client itself accepts any JSON-serializable mapping; ``as_payload``
    renders this builder into that shape. ``extra`` is merged at the top level
    for fields the builder does not model.
    """

    product_code: str
    receiver_name: ReceiverName
    receiver_address: ReceiverAddress
    shipment: ShipmentDetails
    extra: Dict[str, Any] = field(default_factory=dict)

    def as_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "productCode": self.product_code,
            "receiverDetails": {
                "name": {
                    "firstName": self.receiver_name.first_name,
                    "lastName": self.receiver_name.last_name,
                },
                "address": {
                    "street": self.receiver_address.street,
                    "houseNo": self.receiver_address.house_no,
                    "postalCode": self.receiver_address.postal_code,
                    "city": self.receiver_address.city,
                    "country": self.receiver_address.country,
                },
            },
            "shipmentDetails": {
                "weightInGrams": self.shipment.weight_in_grams,
                "length": self.shipment.length,
                "width": self.shipment.width,
                "height": self.shipment.height,
            },
        }
        payload.update(self.extra)
        return payload


def sample_order(product_code: Optional[str] = None) -> OrderRequest:
    """A sandbox-friendly order used when no order file is supplied."""
    return OrderRequest(
        product_code=product_code or "GPP",
        receiver_name=ReceiverName(first_name="John", last_name="Doe"),
        receiver_address=ReceiverAddress(
            street="Sample Street",
            house_no="123",
            postal_code="12345",
            city="Sample City",
            country="DE",
        ),
        shipment=ShipmentDetails(weight_in_grams=1000, length=20, width=15, height=10),
    )
