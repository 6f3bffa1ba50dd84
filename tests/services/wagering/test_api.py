"""
Tests for the Wagering Service HTTP API.
"""

import hashlib
import json

import pytest
from httpx import AsyncClient

from arena_shared.models import BetSide
from arena_shared.zk import commit, match_ref_for, scalar_bytes

from tests.conftest import ALICE, BOB, TrapdoorKey, bearer, snarkjs_proof

MATCH_ID = "1d2c3b4a-5e6f-4708-9a1b-2c3d4e5f6a7b"


class TestHealthEndpoints:
    """Tests for health check endpoints."""

    @pytest.mark.asyncio
    async def test_health_check(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["service"] == "wagering"
        assert data["components"]["ledger"]["mode"] == "mock"

    @pytest.mark.asyncio
    async def test_root(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.get("/")

        assert response.status_code == 200
        assert response.json()["service"] == "Veilstar Arena Wagering Service"

    @pytest.mark.asyncio
    async def test_request_id_header(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.get("/health")
        assert len(response.headers["x-request-id"]) == 32

        response = await wagering_client.get("/health", headers={"X-Request-ID": "trace-1"})
        assert response.headers["x-request-id"] == "trace-1"


class TestPoolEndpoints:
    """Tests for pool and bet endpoints."""

    @pytest.mark.asyncio
    async def test_betting_round_trip(
        self,
        wagering_client: AsyncClient,
        admin_headers: dict[str, str],
        alice_headers: dict[str, str],
        bob_headers: dict[str, str],
    ) -> None:
        response = await wagering_client.post(
            "/api/v1/pools",
            json={"match_id": MATCH_ID},
            headers=admin_headers,
        )
        assert response.status_code == 201
        pool = response.json()["data"]
        assert pool["pool_id"] == 1
        assert pool["match_ref"] == match_ref_for(MATCH_ID).hex()
        assert pool["status"] == "open"

        salt = bytes(range(32))
        response = await wagering_client.post(
            "/api/v1/bets/commit",
            json={
                "pool_id": 1,
                "commitment": commit(BetSide.PLAYER1, salt).hex(),
                "amount": 10_000_000,
            },
            headers=alice_headers,
        )
        assert response.status_code == 201
        assert response.json()["data"]["fee_paid"] == 100_000

        response = await wagering_client.post(
            "/api/v1/bets/commit",
            json={"pool_id": 1, "commitment": commit(BetSide.PLAYER2, bytes(32)).hex(), "amount": 10_000_000},
            headers=bob_headers,
        )
        assert response.status_code == 201

        response = await wagering_client.post("/api/v1/pools/1/lock", headers=admin_headers)
        assert response.json()["data"]["status"] == "locked"

        response = await wagering_client.post(
            "/api/v1/bets/reveal",
            json={"pool_id": 1, "side": 0, "salt": "0x" + salt.hex()},
            headers=alice_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["side"] == 0

        response = await wagering_client.post(
            "/api/v1/pools/1/settle",
            json={"winner_side": 0},
            headers=admin_headers,
        )
        assert response.json()["data"]["winner_side"] == 0

        response = await wagering_client.post("/api/v1/bets/claim", json={"pool_id": 1}, headers=alice_headers)
        assert response.status_code == 200
        assert response.json()["data"] == 20_000_000

        response = await wagering_client.post("/api/v1/bets/claim", json={"pool_id": 1}, headers=alice_headers)
        assert response.status_code == 409
        assert response.json()["error_code"] == "already_claimed"

        response = await wagering_client.get("/api/v1/treasury")
        assert response.json()["data"]["betting_fees_accrued"] == 200_000

    @pytest.mark.asyncio
    async def test_forfeit_reports_no_payout(
        self,
        wagering_client: AsyncClient,
        admin_headers: dict[str, str],
        bob_headers: dict[str, str],
    ) -> None:
        await wagering_client.post("/api/v1/pools", json={"match_id": MATCH_ID}, headers=admin_headers)
        await wagering_client.post(
            "/api/v1/bets/commit",
            json={"pool_id": 1, "commitment": commit(1, bytes(32)).hex(), "amount": 10_000_000},
            headers=bob_headers,
        )
        await wagering_client.post("/api/v1/pools/1/settle", json={"winner_side": 1}, headers=admin_headers)

        response = await wagering_client.post("/api/v1/bets/claim", json={"pool_id": 1}, headers=bob_headers)

        assert response.status_code == 409
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == "no_payout"
        assert body["category"] == "economic"

        response = await wagering_client.get(f"/api/v1/bets/1/{BOB}")
        assert response.json()["data"]["claimed"] is True

    @pytest.mark.asyncio
    async def test_unknown_pool_is_404(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.get("/api/v1/pools/42")

        assert response.status_code == 404
        assert response.json()["code"] == 1

    @pytest.mark.asyncio
    async def test_missing_token_is_401(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.post("/api/v1/pools", json={"match_id": MATCH_ID})

        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_bettor_cannot_create_pool(
        self,
        wagering_client: AsyncClient,
        alice_headers: dict[str, str],
    ) -> None:
        response = await wagering_client.post("/api/v1/pools", json={"match_id": MATCH_ID}, headers=alice_headers)

        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_role_for_wrong_address_is_rejected(self, wagering_client: AsyncClient) -> None:
        """The admin role gets past the route; the contract still checks the address."""
        response = await wagering_client.post(
            "/api/v1/pools",
            json={"match_id": MATCH_ID},
            headers=bearer("GIMPOSTOR", roles=["admin"]),
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_bad_hex_is_422(self, wagering_client: AsyncClient, alice_headers: dict[str, str]) -> None:
        response = await wagering_client.post(
            "/api/v1/bets/commit",
            json={"pool_id": 1, "commitment": "not-hex", "amount": 10_000_000},
            headers=alice_headers,
        )

        assert response.status_code == 422


class TestVerifierEndpoints:
    """Tests for the key registry and zk settlement over HTTP."""

    @pytest.mark.asyncio
    async def test_install_and_settle_with_proof(
        self,
        wagering_client: AsyncClient,
        admin_headers: dict[str, str],
        settlement_key: TrapdoorKey,
    ) -> None:
        response = await wagering_client.post(
            "/api/v1/verifier/keys",
            json={
                "vk_id": settlement_key.vk_id.hex(),
                "alpha_g1": settlement_key.alpha_g1.hex(),
                "beta_g2": settlement_key.beta_g2.hex(),
                "gamma_g2": settlement_key.gamma_g2.hex(),
                "delta_g2": settlement_key.delta_g2.hex(),
                "ic": [p.hex() for p in settlement_key.ic],
            },
            headers=admin_headers,
        )
        assert response.status_code == 201

        response = await wagering_client.get(f"/api/v1/verifier/keys/{settlement_key.vk_id.hex()}")
        assert response.json()["data"]["ic"] == [p.hex() for p in settlement_key.ic]

        response = await wagering_client.put(
            "/api/v1/pools/config/zk",
            json={"verifier": "CVERIFIER", "vk_id": settlement_key.vk_id.hex()},
            headers=admin_headers,
        )
        assert response.status_code == 200

        await wagering_client.post("/api/v1/pools", json={"match_id": MATCH_ID}, headers=admin_headers)
        inputs = [match_ref_for(MATCH_ID), scalar_bytes(1), scalar_bytes(1)]

        response = await wagering_client.post(
            "/api/v1/pools/1/settle-zk",
            json={
                "winner_side": 1,
                "vk_id": settlement_key.vk_id.hex(),
                "proof": settlement_key.prove(inputs).hex(),
                "public_inputs": [p.hex() for p in inputs],
            },
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "settled"

    @pytest.mark.asyncio
    async def test_snarkjs_key_and_proof(self, wagering_client: AsyncClient, admin_headers: dict[str, str]) -> None:
        key = TrapdoorKey(n_public=1, seed=300)
        raw = json.dumps(key.snarkjs_document(), indent=2)

        response = await wagering_client.post(
            "/api/v1/verifier/keys/snarkjs",
            json={"verification_key_json": raw},
            headers=admin_headers,
        )
        assert response.status_code == 201
        vk_id = response.json()["vk_id"]
        assert vk_id == hashlib.sha256(raw.encode()).hexdigest()

        proof = snarkjs_proof(key.prove([scalar_bytes(42)]))
        response = await wagering_client.post(
            "/api/v1/verifier/verify/snarkjs",
            json={"vk_id": vk_id, "proof": proof, "public_signals": ["42"]},
        )
        assert response.status_code == 200
        assert response.json()["valid"] is True

        response = await wagering_client.post(
            "/api/v1/verifier/verify/snarkjs",
            json={"vk_id": vk_id, "proof": proof, "public_signals": ["43"]},
        )
        assert response.json()["valid"] is False

    @pytest.mark.asyncio
    async def test_snarkjs_key_must_parse(self, wagering_client: AsyncClient, admin_headers: dict[str, str]) -> None:
        response = await wagering_client.post(
            "/api/v1/verifier/keys/snarkjs",
            json={"verification_key_json": "{not json"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_verify_unknown_key(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.post(
            "/api/v1/verifier/verify",
            json={"vk_id": "00" * 32, "proof": "00" * 256, "public_inputs": []},
        )

        assert response.status_code == 200
        assert response.json()["valid"] is False

    @pytest.mark.asyncio
    async def test_get_unknown_key(self, wagering_client: AsyncClient) -> None:
        response = await wagering_client.get(f"/api/v1/verifier/keys/{'ab' * 32}")

        assert response.status_code == 404
        assert response.json()["error_code"] == "vk_not_found"


class TestMatchEndpoints:
    """Tests for arena match endpoints."""

    @pytest.mark.asyncio
    async def test_match_flow(
        self,
        wagering_client: AsyncClient,
        admin_headers: dict[str, str],
        alice_headers: dict[str, str],
    ) -> None:
        response = await wagering_client.post(
            "/api/v1/matches",
            json={"session_id": 3, "player1": ALICE, "player2": BOB},
            headers=admin_headers,
        )
        assert response.status_code == 201

        commitment = scalar_bytes(99).hex()
        for _ in range(2):
            response = await wagering_client.post(
                "/api/v1/matches/3/zk/commit",
                json={"round": 1, "turn": 1, "commitment": commitment},
                headers=alice_headers,
            )
            assert response.status_code == 200

        response = await wagering_client.get("/api/v1/matches/3/zk")
        assert response.json()["data"]["player1_commits"] == 1

        response = await wagering_client.post(
            "/api/v1/matches/3/zk/commit",
            json={"round": 0, "turn": 1, "commitment": commitment},
            headers=alice_headers,
        )
        assert response.status_code == 400
        assert response.json()["error_code"] == "invalid_slot"

        response = await wagering_client.post(
            "/api/v1/matches/3/end",
            json={"player1_won": True},
            headers=admin_headers,
        )
        assert response.json()["data"]["winner"] == ALICE

        response = await wagering_client.post(
            "/api/v1/matches/3/end",
            json={"player1_won": True},
            headers=admin_headers,
        )
        assert response.status_code == 409
