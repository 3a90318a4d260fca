"""
Tests for the HTTP surface. Uses FastAPI TestClient against in-memory SQLite.
"""

from db.enums import UINT256_MAX
from utils.abi_codec import encode_execute_call, encode_transfer_call

from conftest import API_KEY, OWNER, OTHER_OWNER, SAVINGS, MERCHANT, USDC


def _payment_hex(amount):
    return "0x" + encode_execute_call(USDC, 0, encode_transfer_call(MERCHANT, amount)).hex()


def _deposit(client, headers, amount):
    resp = client.post(
        "/api/v1/ledger/deposits",
        json={"owner_id": OWNER, "asset": USDC, "amount": str(amount)},
        headers=headers(),
    )
    assert resp.status_code == 201
    return resp


def _set_rule(client, headers, increment, owner=OWNER, index=0, caller=OWNER):
    return client.put(
        f"/api/v1/automations/{owner}/{index}",
        json={"savings_destination": SAVINGS, "round_up_increment": str(increment)},
        headers=headers(caller),
    )


# ── Health & API key ──────────────────────────────────────────────

def test_health_needs_no_api_key(client):
    resp = client.get("/")
    assert resp.status_code == 200


def test_wrong_api_key_is_rejected(client):
    resp = client.get(f"/api/v1/automations/{OWNER}/0", headers={"X-API-Key": "nope"})
    assert resp.status_code == 401


def test_missing_api_key_is_rejected(client):
    resp = client.get(f"/api/v1/automations/{OWNER}/0")
    assert resp.status_code == 422


# ── Rules ─────────────────────────────────────────────────────────

def test_unwritten_slot_reads_disabled(client, auth_headers):
    resp = client.get(f"/api/v1/automations/{OWNER}/4", headers=auth_headers())
    assert resp.status_code == 200
    body = resp.json()
    assert body["enabled"] is False
    assert body["round_up_increment"] == "0"


def test_set_and_read_rule(client, auth_headers):
    resp = _set_rule(client, auth_headers, 1_000_000)
    assert resp.status_code == 200
    body = resp.json()
    assert body["savings_destination"] == SAVINGS
    assert body["round_up_increment"] == "1000000"
    assert body["enabled"] is True
    assert body["is_active"] is True

    listed = client.get(f"/api/v1/automations/{OWNER}", headers=auth_headers()).json()
    assert [r["automation_index"] for r in listed] == [0]


def test_set_rule_for_other_owner_is_forbidden(client, auth_headers):
    resp = _set_rule(client, auth_headers, 1_000_000, owner=OWNER, caller=OTHER_OWNER)
    assert resp.status_code == 403

    body = client.get(f"/api/v1/automations/{OWNER}/0", headers=auth_headers()).json()
    assert body["enabled"] is False


def test_disable_rule(client, auth_headers):
    _set_rule(client, auth_headers, 1_000_000)

    resp = client.post(f"/api/v1/automations/{OWNER}/0/disable", headers=auth_headers())
    assert resp.status_code == 200
    assert resp.json()["enabled"] is False
    assert resp.json()["round_up_increment"] == "1000000"


def test_invalid_increment_is_rejected(client, auth_headers):
    resp = _set_rule(client, auth_headers, -5)
    assert resp.status_code == 422
    resp = _set_rule(client, auth_headers, 2**256)
    assert resp.status_code == 422


def test_invalid_caller_header(client):
    resp = _set_rule(client, lambda caller: {"X-API-Key": API_KEY, "X-Owner-Id": "bob"}, 10)
    assert resp.status_code == 400


# ── Transfers ─────────────────────────────────────────────────────

def test_execute_with_round_up(client, auth_headers):
    _deposit(client, auth_headers, 10_000_000)
    _set_rule(client, auth_headers, 1_000_000)

    resp = client.post("/api/v1/transfers/execute", json={"payload": _payment_hex(2_345_678)}, headers=auth_headers())
    assert resp.status_code == 200
    body = resp.json()
    assert body["savings"]["savings_amount"] == "654322"
    assert body["savings"]["round_up_amount"] == "3000000"
    assert body["primary"]["recipient"] == MERCHANT
    assert body["primary"]["amount"] == "2345678"

    balance = client.get(f"/api/v1/ledger/balances/{SAVINGS}/{USDC}", headers=auth_headers()).json()
    assert balance["balance"] == "654322"


def test_execute_without_round_up(client, auth_headers):
    _deposit(client, auth_headers, 10_000_000)
    _set_rule(client, auth_headers, 500_000)

    body = client.post(
        "/api/v1/transfers/execute", json={"payload": _payment_hex(1_000_000)}, headers=auth_headers()
    ).json()
    assert body["savings"] is None
    assert body["primary"]["amount"] == "1000000"


def test_execute_insufficient_funds_moves_nothing(client, auth_headers):
    _deposit(client, auth_headers, 2_345_678)
    _set_rule(client, auth_headers, 1_000_000)

    resp = client.post("/api/v1/transfers/execute", json={"payload": _payment_hex(2_345_678)}, headers=auth_headers())
    assert resp.status_code == 422

    owner = client.get(f"/api/v1/ledger/balances/{OWNER}/{USDC}", headers=auth_headers()).json()
    savings = client.get(f"/api/v1/ledger/balances/{SAVINGS}/{USDC}", headers=auth_headers()).json()
    assert owner["balance"] == "2345678"
    assert savings["balance"] == "0"


def test_deposit_overflow_is_rejected(client, auth_headers):
    _deposit(client, auth_headers, UINT256_MAX)

    resp = client.post(
        "/api/v1/ledger/deposits",
        json={"owner_id": OWNER, "asset": USDC, "amount": "1"},
        headers=auth_headers(),
    )
    assert resp.status_code == 422

    balance = client.get(f"/api/v1/ledger/balances/{OWNER}/{USDC}", headers=auth_headers()).json()
    assert balance["balance"] == str(UINT256_MAX)


def test_execute_malformed_payload(client, auth_headers):
    resp = client.post("/api/v1/transfers/execute", json={"payload": "0xb61d27f6"}, headers=auth_headers())
    assert resp.status_code == 400
