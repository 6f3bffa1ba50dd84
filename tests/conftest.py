"""
Test Configuration
==================

Pytest fixtures for Veilstar Arena tests.
"""

import hashlib
import os
from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "testing"
os.environ["CHAIN_MODE"] = "mock"

from arena_shared.blockchain import ContractEnv, InMemoryTokenLedger, MockGameHub  # noqa: E402
from arena_shared.config import ArenaSettings, BettingSettings  # noqa: E402
from arena_shared.zk import Groth16VerifierContract  # noqa: E402
from arena_shared.zk.bn254 import G1, G2, curve_order, encode_g1, encode_g2, multiply  # noqa: E402

ADMIN = "GADMIN"
TREASURY = "GTREASURY"
ALICE = "GALICE"
BOB = "GBOB"
CAROL = "GCAROL"

BETTING_ADDRESS = "CBETTING"
ARENA_ADDRESS = "CARENA"
VERIFIER_ADDRESS = "CVERIFIER"

NOW = 1_700_000_000
STARTING_BALANCE = 1_000_000_000


def _coords(data: bytes) -> list[int]:
    return [int.from_bytes(data[i : i + 32], "big") for i in range(0, len(data), 32)]


def g1_json(data: bytes) -> list[str]:
    """snarkjs projective form of an encoded G1 point."""
    x, y = _coords(data)
    return [str(x), str(y), "1"]


def g2_json(data: bytes) -> list[list[str]]:
    """snarkjs form of an encoded G2 point (c0 before c1)."""
    x_c1, x_c0, y_c1, y_c0 = _coords(data)
    return [[str(x_c0), str(x_c1)], [str(y_c0), str(y_c1)], ["1", "0"]]


def snarkjs_proof(proof: bytes) -> dict:
    return {
        "pi_a": g1_json(proof[:64]),
        "pi_b": g2_json(proof[64:192]),
        "pi_c": g1_json(proof[192:]),
        "protocol": "groth16",
        "curve": "bn128",
    }


class TrapdoorKey:
    """
    Groth16 key built from known discrete logs.

    Knowing every exponent lets the test suite produce a proof that
    satisfies the pairing equation for any public inputs, without a
    circuit or a trusted setup.
    """

    def __init__(self, n_public: int, seed: int = 0) -> None:
        self.n_public = n_public
        self.alpha, self.beta = 11 + seed, 13 + seed
        self.gamma, self.delta = 17 + seed, 19 + seed
        self.ic_logs = [23 + 2 * i + seed for i in range(n_public + 1)]

        self.alpha_g1 = encode_g1(multiply(G1, self.alpha))
        self.beta_g2 = encode_g2(multiply(G2, self.beta))
        self.gamma_g2 = encode_g2(multiply(G2, self.gamma))
        self.delta_g2 = encode_g2(multiply(G2, self.delta))
        self.ic = [encode_g1(multiply(G1, u)) for u in self.ic_logs]
        self.vk_id = hashlib.sha256(f"trapdoor-{n_public}-{seed}".encode()).digest()

    def prove(self, public_inputs: list[bytes], c: int = 5) -> bytes:
        """Proof with ``B = G2`` and ``C = c * G1`` for ``public_inputs``."""
        x = [int.from_bytes(p, "big") for p in public_inputs]
        s = (self.ic_logs[0] + sum(xi * ui for xi, ui in zip(x, self.ic_logs[1:]))) % curve_order
        a = (self.alpha * self.beta + s * self.gamma + c * self.delta) % curve_order
        return encode_g1(multiply(G1, a)) + encode_g2(G2) + encode_g1(multiply(G1, c))

    def snarkjs_document(self) -> dict:
        """The key as snarkjs ``verification_key.json`` would hold it."""
        return {
            "protocol": "groth16",
            "curve": "bn128",
            "nPublic": self.n_public,
            "vk_alpha_1": g1_json(self.alpha_g1),
            "vk_beta_2": g2_json(self.beta_g2),
            "vk_gamma_2": g2_json(self.gamma_g2),
            "vk_delta_2": g2_json(self.delta_g2),
            "IC": [g1_json(p) for p in self.ic],
        }

    async def install(self, verifier: Groth16VerifierContract, caller: str = ADMIN) -> None:
        await verifier.set_verification_key(
            caller,
            self.vk_id,
            self.alpha_g1,
            self.beta_g2,
            self.gamma_g2,
            self.delta_g2,
            self.ic,
        )


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture(scope="session")
def settlement_key() -> TrapdoorKey:
    """Key for ``[match_ref, pool_id, winner_side]`` settlement proofs."""
    return TrapdoorKey(n_public=3)


@pytest.fixture(scope="session")
def round_key() -> TrapdoorKey:
    """Key for round proofs whose single public input is the commitment."""
    return TrapdoorKey(n_public=1, seed=100)


@pytest.fixture(scope="session")
def outcome_key() -> TrapdoorKey:
    """Key for match outcome proofs over ``[session_id, winner_side]``."""
    return TrapdoorKey(n_public=2, seed=200)


@pytest.fixture
def env() -> ContractEnv:
    return ContractEnv(timestamp=NOW)


@pytest.fixture
def ledger() -> InMemoryTokenLedger:
    ledger = InMemoryTokenLedger()
    for address in (ALICE, BOB, CAROL):
        ledger.mint(address, STARTING_BALANCE)
    return ledger


@pytest.fixture
def hub() -> MockGameHub:
    return MockGameHub()


@pytest.fixture
def betting_config() -> BettingSettings:
    return BettingSettings(fee_bps=100, min_bet=10, sweep_interval_seconds=86_400)


@pytest.fixture
def arena_config() -> ArenaSettings:
    return ArenaSettings(stake_fee_bps=10, sweep_interval_seconds=86_400, zk_gate_required=False)


@pytest.fixture
def verifier(env: ContractEnv) -> Groth16VerifierContract:
    return Groth16VerifierContract(env, admin=ADMIN, address=VERIFIER_ADDRESS)


@pytest.fixture
def betting(env, ledger, betting_config):
    from arena_services.wagering.services import BetPoolEngine

    return BetPoolEngine(
        env,
        ledger,
        admin=ADMIN,
        treasury=TREASURY,
        address=BETTING_ADDRESS,
        config=betting_config,
    )


@pytest.fixture
def arena(env, ledger, hub, arena_config):
    from arena_services.wagering.services import ArenaMatchContract

    return ArenaMatchContract(
        env,
        ledger,
        hub,
        admin=ADMIN,
        treasury=TREASURY,
        address=ARENA_ADDRESS,
        config=arena_config,
    )


@pytest_asyncio.fixture
async def wagering_client(ledger, hub) -> AsyncGenerator[AsyncClient, None]:
    """Create test client for the Wagering Service on a fresh runtime."""
    from arena_shared.config import settings
    from arena_services.wagering.main import app
    from arena_services.wagering.services import WageringRuntime, reset_runtime, set_runtime

    set_runtime(WageringRuntime(settings, env=ContractEnv(timestamp=NOW), ledger=ledger, hub=hub))
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client
    reset_runtime()


def bearer(address: str, roles: list[str] | None = None) -> dict[str, str]:
    from arena_shared.auth import create_access_token

    return {"Authorization": f"Bearer {create_access_token(address, roles=roles)}"}


@pytest.fixture
def admin_headers() -> dict[str, str]:
    """Generate admin authentication headers."""
    return bearer(ADMIN, roles=["admin"])


@pytest.fixture
def alice_headers() -> dict[str, str]:
    return bearer(ALICE, roles=["bettor"])


@pytest.fixture
def bob_headers() -> dict[str, str]:
    return bearer(BOB, roles=["bettor"])
