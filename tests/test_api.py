import asyncio
from decimal import Decimal

from settlement_server.modules.games import GameConfigService
from settlement_server.modules.lives import LivesLedger
from tests.conftest import CRON_SECRET, WEBHOOK_SECRET, tetris_moves


async def _claim(client, wallet="api-wallet", **extra):
    payload = {"wallet": wallet, "deviceId": "device-api", "ip": "203.0.113.7", "gameId": "tetris", **extra}
    return await client.post("/api/lives/claim-daily", json=payload)


async def _buy(client, wallet="api-wallet"):
    return await client.post("/api/payments/buy-life", json={"wallet": wallet, "gameId": "tetris"})


def _webhook(signature, recipient, amount, secret=WEBHOOK_SECRET):
    return {
        "json": {"signature": signature, "recipient": recipient, "amount": amount, "token": "MWOR", "timestamp": 1},
        "headers": {"x-webhook-secret": secret},
    }


async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "ok"


async def test_claim_then_end_round(client, events):
    res = await _claim(client)
    assert res.status_code == 200
    assert res.json() == {"free": 1, "bonus": 0, "paid_bank": 0, "total": 1}

    res = await client.post(
        "/api/rounds/end",
        json={"wallet": "api-wallet", "moves": tetris_moves(8), "seed": "api-seed", "gameId": "tetris"},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "success"
    assert body["remainingLives"] == 0
    assert body["gameId"] == "tetris"
    assert {"score", "playId", "seedHash", "gameData"} <= set(body)

    res = await client.get("/api/lives/api-wallet")
    assert res.json()["total"] == 0

    res = await client.get("/api/rounds/stats/api-wallet")
    assert res.json()["stats"][0]["gamesPlayed"] == 1


async def test_end_round_status_codes(client):
    await _claim(client)
    payload = {"wallet": "api-wallet", "moves": tetris_moves(8), "seed": "s", "gameId": "tetris"}

    assert (await client.post("/api/rounds/end", json={**payload, "gameId": "missing"})).status_code == 404
    assert (await client.post("/api/rounds/end", json={**payload, "gameId": "casual"})).status_code == 400
    assert (await client.post("/api/rounds/end", json={**payload, "moves": []})).status_code == 400
    assert (await client.post("/api/rounds/end", json={**payload, "moves": "left"})).status_code == 400
    assert (await client.post("/api/rounds/end", json={"moves": tetris_moves(2), "seed": "s"})).status_code == 400

    bad = tetris_moves(4)
    bad[1]["timestamp"] = 0
    res = await client.post("/api/rounds/end", json={**payload, "moves": bad})
    assert res.status_code == 400
    assert res.json()["detail"]["details"] == ["Invalid timestamp order at move 1"]

    assert (await client.post("/api/rounds/end", json=payload)).status_code == 200
    assert (await client.post("/api/rounds/end", json=payload)).status_code == 409
    res = await client.post("/api/rounds/end", json={**payload, "seed": "other"})
    assert res.status_code == 403


async def test_claim_requires_device_and_ip(client):
    for missing in ("deviceId", "ip"):
        payload = {"wallet": "api-wallet", "deviceId": "device-api", "ip": "203.0.113.7", "gameId": "tetris"}
        del payload[missing]
        res = await client.post("/api/lives/claim-daily", json=payload)
        assert res.status_code == 400
        assert res.json()["detail"] == "Invalid request"
    assert (await _claim(client, ip="")).status_code == 400
    assert (await client.get("/api/lives/api-wallet")).json()["total"] == 0


async def test_concurrent_duplicate_submissions_settle_once(client, session_factory, clock):
    async with session_factory() as session:
        await LivesLedger.with_session(session, clock).credit_paid("api-wallet", 3)
        await session.commit()
    payload = {"wallet": "api-wallet", "moves": tetris_moves(8), "seed": "race", "gameId": "tetris"}

    responses = await asyncio.gather(*[client.post("/api/rounds/end", json=payload) for _ in range(4)])

    codes = sorted(res.status_code for res in responses)
    assert codes == [200, 409, 409, 409]
    assert (await client.get("/api/lives/api-wallet")).json()["paid_bank"] == 2


async def test_claim_rate_limit_returns_429(client):
    for _ in range(3):
        assert (await _claim(client)).status_code == 200
    assert (await _claim(client)).status_code == 429


async def test_buy_life_and_webhook_settlement(client, chain):
    res = await _buy(client)
    assert res.status_code == 200
    quote = res.json()
    assert quote["priceInToken"] == {"cheap": 30, "mid": 90, "high": 270}
    assert quote["livesPerTier"] == {"cheap": 1, "mid": 3, "high": 10}
    assert Decimal(quote["priceUSD"]["mid"]) == Decimal("0.09")
    assert quote["remainingPaidLives"] == 10
    address = quote["payAddr"]

    res = await client.get(f"/api/payments/temp-address/{address}")
    assert res.status_code == 200
    assert res.json()["wallet"] == "api-wallet"

    chain.add_transfer("sig-api", address, "90")
    res = await client.post("/api/webhooks/payments", **_webhook("sig-api", address, 90))
    assert res.status_code == 200
    assert res.json()["status"] == "success"
    assert res.json()["livesBought"] == 3
    assert res.json()["tier"] == "mid"

    res = await client.post("/api/webhooks/payments", **_webhook("sig-api", address, 90))
    assert res.status_code == 200
    assert res.json()["status"] == "already_processed"

    assert (await client.get("/api/lives/api-wallet")).json()["paid_bank"] == 3
    assert (await client.get(f"/api/payments/temp-address/{address}")).status_code == 404


async def test_webhook_failures(client, chain):
    address = (await _buy(client)).json()["payAddr"]

    res = await client.post("/api/webhooks/payments", **_webhook("sig-1", address, 90, secret="wrong-secret"))
    assert res.status_code == 401

    res = await client.post("/api/webhooks/payments", **_webhook("sig-1", "Unknown111", 90))
    assert res.status_code == 404

    res = await client.post("/api/webhooks/payments", **_webhook("sig-pending", address, 90))
    assert res.status_code == 503

    chain.add_transfer("sig-small", address, "5")
    res = await client.post("/api/webhooks/payments", **_webhook("sig-small", address, 5))
    assert res.status_code == 400


async def test_temp_address_expiry_returns_410(client, clock):
    address = (await _buy(client)).json()["payAddr"]
    clock.advance(minutes=20)
    assert (await client.get(f"/api/payments/temp-address/{address}")).status_code == 410


async def test_confirm_endpoint(client, chain):
    address = (await _buy(client)).json()["payAddr"]
    chain.add_transfer("sig-confirm", address, "30")

    res = await client.post(f"/api/payments/{address}/confirm")
    assert res.status_code == 200
    assert [item["signature"] for item in res.json()["settled"]] == ["sig-confirm"]
    assert (await client.post("/api/payments/Unknown111/confirm")).status_code == 404


async def test_leaderboard_endpoint(client):
    await _claim(client)
    await client.post(
        "/api/rounds/end",
        json={"wallet": "api-wallet", "moves": tetris_moves(8), "seed": "lb", "gameId": "tetris"},
    )
    res = await client.get("/api/leaderboard/tetris", params={"period": "all"})
    assert res.status_code == 200
    assert res.json()["entries"][0]["wallet"] == "api-wallet"
    assert (await client.get("/api/leaderboard/tetris", params={"period": "yearly"})).status_code == 400
    assert (await client.get("/api/leaderboard/missing")).status_code == 404


async def test_reset_midnight_requires_cron_secret(client, clock):
    await _claim(client)
    assert (await client.post("/api/admin/reset-midnight")).status_code == 401

    clock.advance(days=1)
    res = await client.post("/api/admin/reset-midnight", headers={"Authorization": f"Bearer {CRON_SECRET}"})
    assert res.status_code == 200
    assert res.json() == {"accountsReset": 1, "markersPurged": 0}


async def test_reset_midnight_uses_default_game_grant(client, session_factory, settings, clock):
    async with session_factory() as session:
        await GameConfigService.with_session(session, settings).save(
            game_id="tetris",
            name="Tetris",
            lives_config={"daily_free_lives": 2, "claim_attempts_per_day": 3, "paid_life_cap": 10},
            scoring_rules={"validation_required": True, "engine": "tetris"},
        )
        await LivesLedger.with_session(session, clock).credit_paid("sleeper", 1)
        await session.commit()

    clock.advance(days=1)
    res = await client.post("/api/admin/reset-midnight", headers={"Authorization": f"Bearer {CRON_SECRET}"})
    assert res.status_code == 200
    assert (await client.get("/api/lives/sleeper")).json() == {"free": 2, "bonus": 0, "paid_bank": 1, "total": 3}
