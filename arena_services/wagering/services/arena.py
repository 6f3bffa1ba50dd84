"""
Arena Match Contract
====================

Two-player match sessions with an optional stake layer and a zk round
gate that can hold back finalization until the match is proven.

Round gate, per ``(match, player, round, turn)`` slot:

- ``submit_zk_commit`` records the slot commitment once. Resubmitting
  the same value is a no-op; a different value is a conflict.
- ``submit_zk_verification`` records a proof opening the slot's
  commitment. It must verify under the configured verifier (and the
  configured key id, when one is set). A second verification of the
  same slot is a no-op.
- ``submit_zk_match_outcome`` binds the match winner to a proof whose
  public inputs are exactly ``[session_id, winner_side]``, under the
  configured outcome key id. Unlike the slot records it is strictly
  single-submission.

With the gate enabled, ``end_game`` requires at least one verified slot
per player and a proven outcome naming the same winner.

Stake layer: each player deposits ``stake + fee`` (10 bps). On
finalization the winner receives ``2 x stake`` and both fees accrue to
the treasury; ``cancel_match`` refunds every paid deposit in full.

Version: 0.1.0
"""

from dataclasses import dataclass

from arena_shared.blockchain import ContractEnv, ContractStore, GameHub, TokenLedger, Transactional
from arena_shared.config import ArenaSettings
from arena_shared.errors import (
    CommitmentConflictError,
    CommitmentMismatchError,
    CommitmentNotFoundError,
    InvalidAmountError,
    InvalidCommitmentError,
    InvalidMatchError,
    InvalidSlotError,
    MatchAlreadyEndedError,
    MatchNotFoundError,
    NotPlayerError,
    OutcomeAlreadySubmittedError,
    StakeAlreadyPaidError,
    StakeNotConfiguredError,
    UnauthorizedError,
    ZkGateUnsatisfiedError,
    ZkOutcomeMismatchError,
    ZkProofInvalidError,
    ZkVerifierNotConfiguredError,
)
from arena_shared.logging import get_logger
from arena_shared.models import (
    BetSide,
    Match,
    ZkCommitRecord,
    ZkCounts,
    ZkMatchOutcomeRecord,
    ZkVerificationRecord,
)
from arena_shared.treasury import FeeLedger
from arena_shared.zk.inputs import binds_outcome

logger = get_logger(__name__)


# =============================================================================
# Storage keys
# =============================================================================


@dataclass(frozen=True)
class AdminKey:
    pass


@dataclass(frozen=True)
class TreasuryKey:
    pass


@dataclass(frozen=True)
class ZkVerifierKey:
    pass


@dataclass(frozen=True)
class ZkVkIdKey:
    pass


@dataclass(frozen=True)
class ZkOutcomeVkIdKey:
    pass


@dataclass(frozen=True)
class ZkGateRequiredKey:
    pass


@dataclass(frozen=True)
class MatchKey:
    session_id: int


@dataclass(frozen=True)
class ZkCommitKey:
    session_id: int
    player: str
    round: int
    turn: int
    side: BetSide


@dataclass(frozen=True)
class ZkVerificationKey:
    session_id: int
    player: str
    round: int
    turn: int
    side: BetSide


@dataclass(frozen=True)
class ZkOutcomeKey:
    session_id: int


# =============================================================================
# Contract
# =============================================================================


class ArenaMatchContract:
    """Match contract with stakes and the zk round gate."""

    def __init__(
        self,
        env: ContractEnv,
        ledger: TokenLedger,
        hub: GameHub,
        admin: str,
        treasury: str,
        address: str,
        config: ArenaSettings,
    ) -> None:
        self._env = env
        self._ledger = ledger
        self._hub = hub
        self.address = address
        self.config = config
        self._store = ContractStore(env, address)
        self._fees = FeeLedger(self._store, config.stake_fee_bps, config.sweep_interval_seconds)

        for participant in (ledger, hub):
            if isinstance(participant, Transactional):
                env.register(participant)

        self._store.set(AdminKey(), admin)
        self._store.set(TreasuryKey(), treasury)
        self._store.set(ZkGateRequiredKey(), config.zk_gate_required)
        env.deploy(address, self)

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _require_admin(self, caller: str) -> None:
        if caller != self.get_admin():
            logger.warning("unauthorized_call", contract=self.address, caller=caller)
            raise UnauthorizedError(caller=caller)

    def _require_self(self, caller: str, player: str) -> None:
        if caller != player:
            raise UnauthorizedError("Caller may only act for itself", caller=caller, player=player)

    def _load_match(self, session_id: int) -> Match:
        match = self._store.get(MatchKey(session_id))
        if match is None:
            raise MatchNotFoundError(session_id=session_id)
        return match

    def _load_live_match(self, session_id: int) -> Match:
        match = self._load_match(session_id)
        if match.ended:
            raise MatchAlreadyEndedError(session_id=session_id)
        return match

    def _save_match(self, match: Match) -> None:
        self._store.set(MatchKey(match.session_id), match, ttl_seconds=self.config.retention_seconds)

    def _side_of(self, match: Match, player: str) -> BetSide:
        side = match.side_of(player)
        if side is None:
            raise NotPlayerError(session_id=match.session_id, player=player)
        return side

    @staticmethod
    def _check_slot(round: int, turn: int) -> None:
        if round < 1 or turn < 1:
            raise InvalidSlotError(round=round, turn=turn)

    def _verifier_for(self, vk_id: bytes, vk_key: object = ZkVkIdKey()):
        verifier_address = self._store.get(ZkVerifierKey())
        if verifier_address is None:
            raise ZkVerifierNotConfiguredError()

        configured_vk_id = self._store.get(vk_key)
        if configured_vk_id is not None and bytes(vk_id) != configured_vk_id:
            raise ZkProofInvalidError("Verification key id mismatch", vk_id=bytes(vk_id).hex())

        verifier = self._env.resolve(verifier_address)
        if verifier is None:
            raise ZkVerifierNotConfiguredError(verifier=verifier_address)
        return verifier_address, verifier

    def _publish(self, topic: str, session_id: int, data: object = None) -> None:
        self._env.publish(self.address, topic, key=session_id, data=data)

    # =========================================================================
    # Match lifecycle
    # =========================================================================

    async def start_game(
        self,
        caller: str,
        session_id: int,
        player1: str,
        player2: str,
        player1_points: int = 0,
        player2_points: int = 0,
    ) -> Match:
        """Register a match with the hub, then record it (admin only)."""
        async with self._env.atomic("start_game"):
            self._require_admin(caller)
            if player1 == player2:
                raise InvalidMatchError("Cannot play against yourself", player=player1)
            if self._store.has(MatchKey(session_id)):
                raise InvalidMatchError("Session already exists", session_id=session_id)

            await self._hub.start_game(
                self.address,
                session_id,
                player1,
                player2,
                player1_points,
                player2_points,
            )

            match = Match(
                session_id=session_id,
                player1=player1,
                player2=player2,
                player1_points=player1_points,
                player2_points=player2_points,
            )
            self._save_match(match)
            self._publish("start", session_id, {"player1": player1, "player2": player2})

        logger.info("match_started", session_id=session_id, player1=player1, player2=player2)
        return match

    async def set_match_stake(self, caller: str, session_id: int, amount: int) -> Match:
        """Set the per-player stake before anyone has deposited (admin only)."""
        async with self._env.atomic("set_match_stake"):
            self._require_admin(caller)
            if amount <= 0:
                raise InvalidAmountError("Stake must be positive", amount=amount)

            match = self._load_live_match(session_id)
            if match.player1_stake_paid or match.player2_stake_paid:
                raise StakeAlreadyPaidError("Stake is locked once a deposit is made", session_id=session_id)

            match.stake_amount = amount
            match.stake_fee = self._fees.fee_for(amount)
            self._save_match(match)

        logger.info("match_stake_set", session_id=session_id, amount=amount, fee=match.stake_fee)
        return match

    async def deposit_stake(self, caller: str, session_id: int, player: str) -> Match:
        """Pay ``stake + fee`` into escrow for ``player``."""
        async with self._env.atomic("deposit_stake"):
            self._require_self(caller, player)
            match = self._load_live_match(session_id)
            side = self._side_of(match, player)

            if match.stake_amount <= 0:
                raise StakeNotConfiguredError(session_id=session_id)
            if match.stake_paid(side):
                raise StakeAlreadyPaidError(session_id=session_id, player=player)

            await self._ledger.transfer(player, self.address, match.stake_amount + match.stake_fee)

            if side == BetSide.PLAYER1:
                match.player1_stake_paid = True
            else:
                match.player2_stake_paid = True
            self._save_match(match)
            self._publish("stake", session_id, {"player": player, "amount": match.stake_amount})

        logger.info("stake_deposited", session_id=session_id, player=player, amount=match.stake_amount)
        return match

    async def cancel_match(self, caller: str, session_id: int) -> int:
        """
        Cancel a live match and refund every paid deposit (admin only).

        Returns:
            Total refunded
        """
        async with self._env.atomic("cancel_match"):
            self._require_admin(caller)
            match = self._load_live_match(session_id)

            refunded = await self._refund_stakes(match)
            match.cancelled = True
            self._save_match(match)
            self._publish("cancel", session_id, refunded)

        logger.info("match_cancelled", session_id=session_id, refunded=refunded)
        return refunded

    async def _refund_stakes(self, match: Match) -> int:
        refunded = 0
        deposit = match.stake_amount + match.stake_fee
        for side in (BetSide.PLAYER1, BetSide.PLAYER2):
            if not match.stake_paid(side):
                continue
            await self._ledger.transfer(self.address, match.player_for(side), deposit)
            refunded += deposit
        match.player1_stake_paid = False
        match.player2_stake_paid = False
        return refunded

    async def end_game(self, caller: str, session_id: int, player1_won: bool) -> Match:
        """
        Finalize a match (admin only).

        With the zk gate enabled both players need a verified slot and a
        proven outcome must exist. A proven outcome, when present, must
        always name the same winner.
        """
        async with self._env.atomic("end_game"):
            self._require_admin(caller)
            match = self._load_live_match(session_id)
            winner = match.player1 if player1_won else match.player2

            outcome: ZkMatchOutcomeRecord | None = self._store.get(ZkOutcomeKey(session_id))
            if self.is_zk_gate_required():
                if match.player1_zk_verified < 1 or match.player2_zk_verified < 1:
                    raise ZkGateUnsatisfiedError(
                        "Both players need a verified round",
                        session_id=session_id,
                        player1_verified=match.player1_zk_verified,
                        player2_verified=match.player2_zk_verified,
                    )
                if outcome is None:
                    raise ZkGateUnsatisfiedError("No proven match outcome", session_id=session_id)
            if outcome is not None and outcome.winner != winner:
                logger.warning(
                    "zk_outcome_mismatch",
                    session_id=session_id,
                    proven_winner=outcome.winner,
                    declared_winner=winner,
                )
                raise ZkOutcomeMismatchError(session_id=session_id)

            await self._hub.end_game(session_id, player1_won)

            payout = 0
            if match.player1_stake_paid and match.player2_stake_paid:
                payout = match.stake_amount * 2
                await self._ledger.transfer(self.address, winner, payout)
                self._fees.accrue(match.stake_fee * 2)
            elif match.player1_stake_paid or match.player2_stake_paid:
                await self._refund_stakes(match)

            match.winner = winner
            self._save_match(match)
            self._publish("end", session_id, {"winner": winner, "payout": payout})

        logger.info("match_ended", session_id=session_id, winner=winner, payout=payout)
        return match

    # =========================================================================
    # zk round gate
    # =========================================================================

    async def submit_zk_commit(
        self,
        caller: str,
        session_id: int,
        player: str,
        round: int,
        turn: int,
        commitment: bytes,
    ) -> ZkCommitRecord:
        """Record a round commitment for one slot (idempotent)."""
        async with self._env.atomic("submit_zk_commit"):
            self._require_self(caller, player)
            self._check_slot(round, turn)
            if len(commitment) != 32:
                raise InvalidCommitmentError(length=len(commitment))

            match = self._load_live_match(session_id)
            side = self._side_of(match, player)
            key = ZkCommitKey(session_id, player, round, turn, side)

            existing: ZkCommitRecord | None = self._store.get(key)
            if existing is not None:
                if existing.commitment != bytes(commitment):
                    raise CommitmentConflictError(session_id=session_id, round=round, turn=turn)
                logger.debug("zk_commit_duplicate", session_id=session_id, round=round, turn=turn)
                return existing

            record = ZkCommitRecord(
                player=player,
                side=side,
                round=round,
                turn=turn,
                commitment=bytes(commitment),
                submitted_at=self._env.timestamp(),
            )
            self._store.set(key, record, ttl_seconds=self.config.retention_seconds)

            if side == BetSide.PLAYER1:
                match.player1_zk_commits += 1
            else:
                match.player2_zk_commits += 1
            self._save_match(match)
            self._publish("zkcommit", session_id, {"player": player, "round": round, "turn": turn})

        logger.info("zk_commit_recorded", session_id=session_id, player=player, round=round, turn=turn)
        return record

    async def submit_zk_verification(
        self,
        caller: str,
        session_id: int,
        player: str,
        round: int,
        turn: int,
        commitment: bytes,
        vk_id: bytes,
        proof: bytes,
        public_inputs: list[bytes],
    ) -> ZkVerificationRecord:
        """
        Record a proof opening a slot's commitment (idempotent).

        The round circuit exposes the commitment as its first public
        input, so ``public_inputs[0]`` must equal the stored commitment.
        """
        async with self._env.atomic("submit_zk_verification"):
            self._require_self(caller, player)
            self._check_slot(round, turn)

            match = self._load_live_match(session_id)
            side = self._side_of(match, player)

            stored: ZkCommitRecord | None = self._store.get(ZkCommitKey(session_id, player, round, turn, side))
            if stored is None:
                raise CommitmentNotFoundError(session_id=session_id, round=round, turn=turn)
            if stored.commitment != bytes(commitment):
                raise CommitmentMismatchError(session_id=session_id, round=round, turn=turn)

            key = ZkVerificationKey(session_id, player, round, turn, side)
            existing: ZkVerificationRecord | None = self._store.get(key)
            if existing is not None:
                logger.debug("zk_verification_duplicate", session_id=session_id, round=round, turn=turn)
                return existing

            verifier_address, verifier = self._verifier_for(vk_id)
            if not public_inputs or bytes(public_inputs[0]) != stored.commitment:
                raise ZkProofInvalidError("Proof does not open this commitment", session_id=session_id)

            verified = await verifier.verify_round_proof(bytes(vk_id), bytes(proof), list(public_inputs))
            if not verified:
                raise ZkProofInvalidError(session_id=session_id, round=round, turn=turn)

            record = ZkVerificationRecord(
                player=player,
                side=side,
                round=round,
                turn=turn,
                verifier=verifier_address,
                commitment=stored.commitment,
                vk_id=bytes(vk_id),
                verified_at=self._env.timestamp(),
            )
            self._store.set(key, record, ttl_seconds=self.config.retention_seconds)

            if side == BetSide.PLAYER1:
                match.player1_zk_verified += 1
            else:
                match.player2_zk_verified += 1
            self._save_match(match)
            self._publish("zkverify", session_id, {"player": player, "round": round, "turn": turn})

        logger.info("zk_round_verified", session_id=session_id, player=player, round=round, turn=turn)
        return record

    async def submit_zk_match_outcome(
        self,
        caller: str,
        session_id: int,
        winner: str,
        vk_id: bytes,
        proof: bytes,
        public_inputs: list[bytes],
    ) -> ZkMatchOutcomeRecord:
        """
        Bind the match winner to a verified proof.

        Any caller may submit; the proof carries the authority. Only one
        outcome is ever accepted per match.
        """
        async with self._env.atomic("submit_zk_match_outcome"):
            match = self._load_live_match(session_id)
            side = self._side_of(match, winner)

            if self._store.has(ZkOutcomeKey(session_id)):
                raise OutcomeAlreadySubmittedError(session_id=session_id)

            if not self._store.has(ZkOutcomeVkIdKey()):
                raise ZkVerifierNotConfiguredError("No outcome key id configured", session_id=session_id)
            verifier_address, verifier = self._verifier_for(vk_id, ZkOutcomeVkIdKey())
            if not binds_outcome(list(public_inputs), session_id, side):
                raise ZkProofInvalidError(
                    "Outcome proof must bind the session and winner side",
                    session_id=session_id,
                    winner=winner,
                )

            verified = await verifier.verify_round_proof(bytes(vk_id), bytes(proof), list(public_inputs))
            if not verified:
                raise ZkProofInvalidError(session_id=session_id)

            record = ZkMatchOutcomeRecord(
                winner=winner,
                verifier=verifier_address,
                vk_id=bytes(vk_id),
                submitted_at=self._env.timestamp(),
            )
            self._store.set(ZkOutcomeKey(session_id), record, ttl_seconds=self.config.retention_seconds)
            self._publish("zkoutcome", session_id, {"winner": winner, "caller": caller})

        logger.info("zk_match_outcome_recorded", session_id=session_id, winner=winner)
        return record

    # =========================================================================
    # Treasury
    # =========================================================================

    async def sweep_treasury(self, caller: str) -> int:
        """Send accrued stake fees to the treasury (admin only)."""
        async with self._env.atomic("sweep_treasury"):
            self._require_admin(caller)
            now = self._env.timestamp()
            amount = self._fees.sweepable(now)
            treasury = self._store.get(TreasuryKey())

            await self._ledger.transfer(self.address, treasury, amount)
            self._fees.mark_swept(now)
            self._env.publish(self.address, "sweep", data={"treasury": treasury, "amount": amount})

        logger.info("treasury_swept", contract=self.address, amount=amount, treasury=treasury)
        return amount

    # =========================================================================
    # Admin setters
    # =========================================================================

    async def set_treasury(self, caller: str, treasury: str) -> None:
        async with self._env.atomic("set_treasury"):
            self._require_admin(caller)
            self._store.set(TreasuryKey(), treasury)
        logger.info("treasury_updated", contract=self.address, treasury=treasury)

    async def set_zk_verifier(
        self,
        caller: str,
        verifier: str,
        vk_id: bytes | None = None,
        outcome_vk_id: bytes | None = None,
    ) -> None:
        """
        Configure the verifier contract and the key ids it is used with.

        ``vk_id``, when set, is required of round proofs. Outcome proofs
        are only accepted once ``outcome_vk_id`` is configured.
        """
        async with self._env.atomic("set_zk_verifier"):
            self._require_admin(caller)
            self._store.set(ZkVerifierKey(), verifier)
            for key, value in ((ZkVkIdKey(), vk_id), (ZkOutcomeVkIdKey(), outcome_vk_id)):
                if value:
                    self._store.set(key, bytes(value))
                else:
                    self._store.remove(key)
        logger.info("zk_verifier_configured", contract=self.address, verifier=verifier)

    async def set_zk_gate_required(self, caller: str, required: bool) -> None:
        async with self._env.atomic("set_zk_gate_required"):
            self._require_admin(caller)
            self._store.set(ZkGateRequiredKey(), bool(required))
        logger.info("zk_gate_updated", contract=self.address, required=bool(required))

    # =========================================================================
    # Read helpers
    # =========================================================================

    def get_admin(self) -> str:
        return self._store.get(AdminKey())

    def get_treasury(self) -> str:
        return self._store.get(TreasuryKey())

    def get_match(self, session_id: int) -> Match:
        return self._load_match(session_id)

    def is_zk_gate_required(self) -> bool:
        return bool(self._store.get(ZkGateRequiredKey(), False))

    def get_fee_accrued(self) -> int:
        return self._fees.accrued()

    def get_zk_commit(self, session_id: int, player: str, round: int, turn: int) -> ZkCommitRecord | None:
        side = self._side_of(self._load_match(session_id), player)
        return self._store.get(ZkCommitKey(session_id, player, round, turn, side))

    def get_zk_verification(
        self, session_id: int, player: str, round: int, turn: int
    ) -> ZkVerificationRecord | None:
        side = self._side_of(self._load_match(session_id), player)
        return self._store.get(ZkVerificationKey(session_id, player, round, turn, side))

    def get_zk_match_outcome(self, session_id: int) -> ZkMatchOutcomeRecord | None:
        return self._store.get(ZkOutcomeKey(session_id))

    def get_zk_counts(self, session_id: int) -> ZkCounts:
        match = self._load_match(session_id)
        return ZkCounts(
            player1_commits=match.player1_zk_commits,
            player2_commits=match.player2_zk_commits,
            player1_verified=match.player1_zk_verified,
            player2_verified=match.player2_zk_verified,
            outcome_submitted=self._store.has(ZkOutcomeKey(session_id)),
        )
