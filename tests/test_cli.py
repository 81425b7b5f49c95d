from __future__ import annotations

import json

import pytest
import responses

from parcel_shipping_client import cli

BASE_URL = "https://shipping.example/dpi"
PDF_BYTES = b"%PDF-1.4 label"


def _seed_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SHIPPING_CLIENT_ID", "client-id")
    monkeypatch.setenv("SHIPPING_CLIENT_SECRET", "client-secret")
    monkeypatch.setenv("SHIPPING_BASE_URL", BASE_URL)
    monkeypatch.delenv("SHIPPING_LABEL_PATH", raising=False)
    monkeypatch.chdir(tmp_path)


def _register_token():
    responses.add(
        responses.POST,
        f"{BASE_URL}/oauth/accesstoken",
        json={"access_token": "tok123", "token_type": "Bearer", "expires_in": 3600},
        status=200,
    )


@responses.activate
def test_main_writes_label_file(monkeypatch, tmp_path):
    _seed_env(monkeypatch, tmp_path)
    _register_token()
    responses.add(responses.POST, f"{BASE_URL}/shipping/v1/orders", json={"orderId": "ORD-1"}, status=201)
    responses.add(responses.GET, f"{BASE_URL}/shipping/v1/items/ORD-1/label", body=PDF_BYTES, status=200)
    output = tmp_path / "labels" / "ord-1.pdf"

    exit_code = cli.main(["--env-file", "", "--output", str(output)])

    assert exit_code == 0
    assert output.read_bytes() == PDF_BYTES
    submitted = json.loads(responses.calls[1].request.body)
    assert submitted["productCode"] == "GPP"


@responses.activate
def test_main_uses_order_file(monkeypatch, tmp_path):
    _seed_env(monkeypatch, tmp_path)
    _register_token()
    responses.add(responses.POST, f"{BASE_URL}/shipping/v1/orders", json={"orderId": "ORD-7"}, status=201)
    responses.add(responses.GET, f"{BASE_URL}/shipping/v1/items/ORD-7/label", body=PDF_BYTES, status=200)
    order_file = tmp_path / "order.json"
    order_file.write_text(json.dumps({"productCode": "GMP", "custom": {"nested": [1, 2]}}))

    exit_code = cli.main(["--env-file", "", "--order-file", str(order_file)])

    assert exit_code == 0
    assert json.loads(responses.calls[1].request.body) == {"productCode": "GMP", "custom": {"nested": [1, 2]}}
    assert (tmp_path / "label.pdf").read_bytes() == PDF_BYTES


@responses.activate
def test_main_stops_after_failed_order(monkeypatch, tmp_path):
    _seed_env(monkeypatch, tmp_path)
    _register_token()
    responses.add(responses.POST, f"{BASE_URL}/shipping/v1/orders", json={"error": "bad address"}, status=400)

    exit_code = cli.main(["--env-file", ""])

    assert exit_code == 1
    assert len(responses.calls) == 2
    assert not (tmp_path / "label.pdf").exists()


@responses.activate
def test_main_stops_after_failed_authentication(monkeypatch, tmp_path):
    _seed_env(monkeypatch, tmp_path)
    responses.add(responses.POST, f"{BASE_URL}/oauth/accesstoken", status=401)

    exit_code = cli.main(["--env-file", ""])

    assert exit_code == 1
    assert len(responses.calls) == 1


@pytest.mark.parametrize("timeout", ["0", "-5"])
@responses.activate
def test_main_rejects_non_positive_timeout(monkeypatch, tmp_path, timeout):
    _seed_env(monkeypatch, tmp_path)

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["--env-file", "", "--timeout", timeout])

    assert excinfo.value.code == 2
    assert len(responses.calls) == 0
