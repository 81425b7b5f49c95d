from __future__ import annotations

import argparse
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from .client import ShippingAPIClient
from .config import AppConfig, ConfigError, load_config
from .errors import ShippingAPIError
from .orders import sample_order

logger = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a parcel order and download its shipping label")
    parser.add_argument("--env-file", default=".env", help="Optional .env file to load settings from")
    parser.add_argument("--base-url", dest="base_url", help="Override SHIPPING_BASE_URL")
    parser.add_argument("--client-id", dest="client_id", help="Override SHIPPING_CLIENT_ID")
    parser.add_argument("--client-secret", dest="client_secret", help="Override SHIPPING_CLIENT_SECRET")
    parser.add_argument("--timeout", dest="timeout", type=int, help="HTTP timeout in seconds")
    parser.add_argument(
        "--order-file",
        dest="order_file",
        help="JSON file holding the order document; defaults to a sample order",
    )
    parser.add_argument("--output", dest="output", help="Where to write the label (default SHIPPING_LABEL_PATH)")
    return parser


def _init_logging():
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _apply_overrides(config: AppConfig, args: argparse.Namespace) -> AppConfig:
    api = config.api
    if args.base_url:
        api = replace(api, base_url=args.base_url.rstrip("/"))
    if args.timeout is not None:
        api = replace(api, timeout_seconds=args.timeout)
    return replace(config, api=api, label_path=args.output or config.label_path)


def _load_order(order_file: Optional[str]) -> Dict[str, Any]:
    if not order_file:
        return sample_order().as_payload()
    try:
        with open(order_file, "r", encoding="utf-8") as handle:
            document = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Unable to read order file {order_file}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigError(f"Order file {order_file} must contain a JSON object")
    return document


def write_label(label: bytes, path: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(label)
    return target


def run(config: AppConfig, order_data: Dict[str, Any], client: Optional[ShippingAPIClient] = None) -> int:
    """Authenticate, create the order and save its label. Returns a process exit code."""
    client = client or ShippingAPIClient(config.credentials, config.api)
    with client:
        try:
            client.authenticate()
        except ShippingAPIError as exc:
            logger.error("Error getting access token: %s", exc)
            return 1

        try:
            order_id = client.create_order(order_data)
        except ShippingAPIError as exc:
            logger.error("Error creating order: %s", exc)
            return 1
        logger.info("Order created with ID: %s", order_id)

        try:
            label = client.get_item_label(order_id)
        except ShippingAPIError as exc:
            logger.error("Error getting item label: %s", exc)
            return 1
        logger.info("Label received, size: %d bytes", len(label))

    try:
        target = write_label(label, config.label_path)
    except OSError as exc:
        logger.error("Error saving label: %s", exc)
        return 1
    logger.info("Label written to %s", target)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    _init_logging()
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        config = load_config(args.env_file, client_id=args.client_id, client_secret=args.client_secret)
        config = _apply_overrides(config, args)
        order_data = _load_order(args.order_file)
    except ConfigError as exc:
        parser.error(str(exc))
    return run(config, order_data)


if __name__ == "__main__":
    raise SystemExit(main())
