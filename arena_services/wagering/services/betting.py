"""
Bet Pool Engine
===============

Spectator betting pools with commit-reveal and optional zk settlement.

Lifecycle:
1. Admin creates a pool for a match (``create_pool``)
2. Bettors commit hidden sides and deposit ``amount + fee`` (``commit_bet``)
3. Admin locks the pool when betting closes (``lock_pool``)
4. Bettors reveal side and salt (``reveal_bet``)
5. Admin settles directly or with a Groth16 proof (``settle_pool`` / ``settle_pool_zk``)
6. Winning revealed bets claim a fixed ``2 x amount`` (``claim_payout``)

A cancelled match is refunded instead (``refund_pool``): every unclaimed
bet gets ``amount + fee`` back.

Payouts are fixed rather than pro-rata, so each claim is O(1). The pool
is therefore not strictly balanced; the protocol absorbs the surplus or
deficit through fee accrual.

Every entrypoint runs as one unit of work. External calls (token
transfers, the verifier) happen before the local writes that depend on
them.

Version: 0.1.0
"""

from dataclasses import dataclass

from arena_shared.blockchain import ContractEnv, ContractStore, TokenLedger, Transactional
from arena_shared.config import BettingSettings
from arena_shared.errors import (
    AlreadyClaimedError,
    AlreadyCommittedError,
    AlreadyRevealedError,
    BetNotFoundError,
    BettingDeadlinePassedError,
    InvalidAmountError,
    InvalidCommitmentError,
    InvalidMatchRefError,
    InvalidRevealError,
    InvalidWinnerError,
    NoPayoutError,
    PoolAlreadyLockedError,
    PoolAlreadySettledError,
    PoolNotFoundError,
    PoolNotLockedError,
    PoolNotOpenError,
    PoolNotSettledError,
    UnauthorizedError,
    ZkProofInvalidError,
    ZkVerifierNotConfiguredError,
)
from arena_shared.logging import get_logger
from arena_shared.models import BetCommit, BetPool, BetSide, PoolStatus
from arena_shared.treasury import FeeLedger
from arena_shared.zk import PROOF_BYTES, binds_settlement, is_scalar, verify_opening

logger = get_logger(__name__)

PAYOUT_MULTIPLIER = 2


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
class PoolCounterKey:
    pass


@dataclass(frozen=True)
class PoolKey:
    pool_id: int


@dataclass(frozen=True)
class BetKey:
    pool_id: int
    bettor: str


@dataclass(frozen=True)
class PoolBettorsKey:
    pool_id: int


# =============================================================================
# Contract
# =============================================================================


class BetPoolEngine:
    """
    Betting pool contract.

    Args:
        env: Shared contract environment
        ledger: Token ledger holding escrow
        admin: Admin address
        treasury: Address receiving swept fees
        address: This contract's address (escrow account)
        config: Betting configuration
    """

    def __init__(
        self,
        env: ContractEnv,
        ledger: TokenLedger,
        admin: str,
        treasury: str,
        address: str,
        config: BettingSettings,
    ) -> None:
        self._env = env
        self._ledger = ledger
        self.address = address
        self.config = config
        self._store = ContractStore(env, address)
        self._fees = FeeLedger(self._store, config.fee_bps, config.sweep_interval_seconds)

        if isinstance(ledger, Transactional):
            env.register(ledger)

        self._store.set(AdminKey(), admin)
        self._store.set(TreasuryKey(), treasury)
        self._store.set(PoolCounterKey(), 0)
        env.deploy(address, self)

    # =========================================================================
    # Internal helpers
    # =========================================================================

    def _require_admin(self, caller: str) -> None:
        if caller != self.get_admin():
            logger.warning("unauthorized_call", contract=self.address, caller=caller)
            raise UnauthorizedError(caller=caller)

    def _require_bettor(self, caller: str, bettor: str) -> None:
        if caller != bettor:
            logger.warning("unauthorized_call", contract=self.address, caller=caller, bettor=bettor)
            raise UnauthorizedError("Caller does not own this bet", caller=caller, bettor=bettor)

    def _load_pool(self, pool_id: int) -> BetPool:
        pool = self._store.get(PoolKey(pool_id))
        if pool is None:
            raise PoolNotFoundError(pool_id=pool_id)
        return pool

    def _load_bet(self, pool_id: int, bettor: str) -> BetCommit:
        bet = self._store.get(BetKey(pool_id, bettor))
        if bet is None:
            raise BetNotFoundError(pool_id=pool_id, bettor=bettor)
        return bet

    def _save_pool(self, pool: BetPool) -> None:
        self._store.set(PoolKey(pool.pool_id), pool, ttl_seconds=self.config.retention_seconds)

    def _save_bet(self, pool_id: int, bet: BetCommit) -> None:
        self._store.set(BetKey(pool_id, bet.bettor), bet, ttl_seconds=self.config.retention_seconds)

    def _publish(self, topic: str, pool_id: int, data: object = None) -> None:
        self._env.publish(self.address, topic, key=pool_id, data=data)

    # =========================================================================
    # Pool lifecycle
    # =========================================================================

    async def create_pool(self, caller: str, match_ref: bytes, deadline_ts: int = 0) -> int:
        """
        Create a pool for a match (admin only).

        Args:
            caller: Calling address
            match_ref: 32-byte match reference, a BN254 scalar so a
                settlement proof can bind it
            deadline_ts: Unix time after which bets are refused; 0 = none

        Returns:
            New pool id (ids start at 1)
        """
        async with self._env.atomic("create_pool"):
            self._require_admin(caller)
            if not is_scalar(bytes(match_ref)):
                raise InvalidMatchRefError(length=len(match_ref), match_ref=bytes(match_ref).hex())

            pool_id = self.get_pool_counter() + 1
            pool = BetPool(
                pool_id=pool_id,
                match_ref=bytes(match_ref),
                deadline_ts=max(0, deadline_ts),
            )

            self._save_pool(pool)
            self._store.set(PoolBettorsKey(pool_id), [], ttl_seconds=self.config.retention_seconds)
            self._store.set(PoolCounterKey(), pool_id)
            self._publish("pool", pool_id, {"match_ref": pool.match_ref.hex()})

        logger.info("pool_created", pool_id=pool_id, deadline_ts=pool.deadline_ts)
        return pool_id

    async def commit_bet(
        self,
        caller: str,
        pool_id: int,
        bettor: str,
        commitment: bytes,
        amount: int,
    ) -> BetCommit:
        """
        Commit a hidden bet and deposit ``amount + fee`` into escrow.

        The commitment is ``SHA256(side_byte || salt)``; see
        :func:`arena_shared.zk.commit`.
        """
        async with self._env.atomic("commit_bet"):
            self._require_bettor(caller, bettor)

            if amount < self.config.min_bet:
                raise InvalidAmountError(amount=amount, minimum=self.config.min_bet)
            if len(commitment) != 32:
                raise InvalidCommitmentError(length=len(commitment))

            pool = self._load_pool(pool_id)
            if pool.status != PoolStatus.OPEN:
                raise PoolNotOpenError(pool_id=pool_id, status=pool.status.value)

            now = self._env.timestamp()
            if pool.deadline_ts > 0 and now > pool.deadline_ts:
                raise BettingDeadlinePassedError(pool_id=pool_id, deadline_ts=pool.deadline_ts)

            bet_key = BetKey(pool_id, bettor)
            if self._store.has(bet_key):
                raise AlreadyCommittedError(pool_id=pool_id, bettor=bettor)

            fee = self._fees.fee_for(amount)
            await self._ledger.transfer(bettor, self.address, amount + fee)

            bet = BetCommit(
                bettor=bettor,
                commitment=bytes(commitment),
                amount=amount,
                fee_paid=fee,
            )
            self._save_bet(pool_id, bet)

            bettors = self._store.get(PoolBettorsKey(pool_id), [])
            bettors.append(bettor)
            self._store.set(PoolBettorsKey(pool_id), bettors, ttl_seconds=self.config.retention_seconds)

            pool.total_pool += amount
            pool.total_fees += fee
            pool.bet_count += 1
            self._save_pool(pool)

            self._publish("bet", pool_id, {"bettor": bettor, "amount": amount})

        logger.info("bet_committed", pool_id=pool_id, bettor=bettor, amount=amount, fee=fee)
        return bet

    async def lock_pool(self, caller: str, pool_id: int) -> BetPool:
        """Close betting (admin only)."""
        async with self._env.atomic("lock_pool"):
            self._require_admin(caller)
            pool = self._load_pool(pool_id)

            if pool.status != PoolStatus.OPEN:
                raise PoolAlreadyLockedError(pool_id=pool_id, status=pool.status.value)

            pool.status = PoolStatus.LOCKED
            self._save_pool(pool)
            self._publish("lock", pool_id, pool.bet_count)

        logger.info("pool_locked", pool_id=pool_id, bet_count=pool.bet_count)
        return pool

    async def reveal_bet(
        self,
        caller: str,
        pool_id: int,
        bettor: str,
        side: BetSide | int,
        salt: bytes,
    ) -> BetCommit:
        """Reveal the side behind a bettor's own commitment."""
        async with self._env.atomic("reveal_bet"):
            self._require_bettor(caller, bettor)
            return self._reveal(pool_id, bettor, side, salt)

    async def admin_reveal_bet(
        self,
        caller: str,
        pool_id: int,
        bettor: str,
        side: BetSide | int,
        salt: bytes,
    ) -> BetCommit:
        """Operator-assisted reveal; same checks, admin instead of bettor auth."""
        async with self._env.atomic("admin_reveal_bet"):
            self._require_admin(caller)
            return self._reveal(pool_id, bettor, side, salt)

    def _reveal(self, pool_id: int, bettor: str, side: BetSide | int, salt: bytes) -> BetCommit:
        pool = self._load_pool(pool_id)
        if pool.status != PoolStatus.LOCKED:
            raise PoolNotLockedError(pool_id=pool_id, status=pool.status.value)

        bet = self._load_bet(pool_id, bettor)
        if bet.revealed:
            raise AlreadyRevealedError(pool_id=pool_id, bettor=bettor)

        if side not in (BetSide.PLAYER1, BetSide.PLAYER2) or not verify_opening(bet.commitment, side, salt):
            logger.warning("reveal_rejected", pool_id=pool_id, bettor=bettor)
            raise InvalidRevealError(pool_id=pool_id, bettor=bettor)

        side = BetSide(side)
        bet.revealed = True
        bet.side = side
        self._save_bet(pool_id, bet)

        if side == BetSide.PLAYER1:
            pool.player1_total += bet.amount
        else:
            pool.player2_total += bet.amount
        pool.reveal_count += 1
        self._save_pool(pool)

        self._publish("reveal", pool_id, {"bettor": bettor, "side": int(side)})
        logger.info("bet_revealed", pool_id=pool_id, bettor=bettor, side=int(side))
        return bet

    # =========================================================================
    # Settlement
    # =========================================================================

    async def settle_pool(self, caller: str, pool_id: int, winner_side: BetSide | int) -> BetPool:
        """
        Declare the winner (admin only).

        Unrevealed bets are treated as forfeited. The pool's fees move to
        the contract-wide accrual counter.
        """
        async with self._env.atomic("settle_pool"):
            self._require_admin(caller)
            return self._settle(pool_id, winner_side)

    async def settle_pool_zk(
        self,
        caller: str,
        pool_id: int,
        winner_side: BetSide | int,
        vk_id: bytes,
        proof: bytes,
        public_inputs: list[bytes],
    ) -> BetPool:
        """
        Settle with a Groth16 proof of the match outcome (admin only).

        The proof must verify under the configured key and its public
        inputs must be exactly ``[match_ref, pool_id, winner_side]``.
        """
        async with self._env.atomic("settle_pool_zk"):
            self._require_admin(caller)

            verifier_address = self._store.get(ZkVerifierKey())
            configured_vk_id = self._store.get(ZkVkIdKey())
            if verifier_address is None or configured_vk_id is None:
                raise ZkVerifierNotConfiguredError()

            if bytes(vk_id) != configured_vk_id:
                raise ZkProofInvalidError("Verification key id mismatch", pool_id=pool_id)
            if len(proof) != PROOF_BYTES or not public_inputs:
                raise ZkProofInvalidError("Malformed proof or public inputs", pool_id=pool_id)

            pool = self._load_pool(pool_id)
            if pool.status.is_terminal:
                raise PoolAlreadySettledError(pool_id=pool_id, status=pool.status.value)
            if winner_side not in (BetSide.PLAYER1, BetSide.PLAYER2):
                raise InvalidWinnerError("Winner side must be 0 or 1", winner_side=int(winner_side))

            if not binds_settlement(list(public_inputs), pool.match_ref, pool_id, BetSide(winner_side)):
                logger.warning("zk_settlement_binding_mismatch", pool_id=pool_id)
                raise ZkProofInvalidError(
                    "Public inputs do not bind this pool and winner",
                    pool_id=pool_id,
                )

            verifier = self._env.resolve(verifier_address)
            if verifier is None:
                raise ZkVerifierNotConfiguredError(verifier=verifier_address)

            verified = await verifier.verify_round_proof(bytes(vk_id), bytes(proof), list(public_inputs))
            if not verified:
                raise ZkProofInvalidError(pool_id=pool_id)

            pool = self._settle(pool_id, winner_side)

        logger.info("pool_settled_zk", pool_id=pool_id, vk_id=bytes(vk_id).hex())
        return pool

    def _settle(self, pool_id: int, winner_side: BetSide | int) -> BetPool:
        pool = self._load_pool(pool_id)
        if pool.status.is_terminal:
            raise PoolAlreadySettledError(pool_id=pool_id, status=pool.status.value)
        if winner_side not in (BetSide.PLAYER1, BetSide.PLAYER2):
            raise InvalidWinnerError("Winner side must be 0 or 1", winner_side=int(winner_side))

        winner = BetSide(winner_side)
        pool.status = PoolStatus.SETTLED
        pool.winner_side = winner
        self._save_pool(pool)

        self._fees.accrue(pool.total_fees)
        self._publish("settle", pool_id, int(winner))

        logger.info(
            "pool_settled",
            pool_id=pool_id,
            winner_side=int(winner),
            fees_accrued=pool.total_fees,
        )
        return pool

    # =========================================================================
    # Claims and refunds
    # =========================================================================

    async def claim_payout(self, caller: str, pool_id: int, bettor: str) -> int:
        """
        Claim a settled bet.

        Returns:
            Amount paid (``2 x amount``)

        Raises:
            NoPayoutError: bet was unrevealed or lost; it is marked claimed
                all the same, so the result is final
        """
        async with self._env.atomic("claim_payout"):
            self._require_bettor(caller, bettor)
            payout = await self._claim(pool_id, bettor)
        return self._finish_claim(pool_id, bettor, payout)

    async def admin_claim_payout(self, caller: str, pool_id: int, bettor: str) -> int:
        """Operator-assisted claim; pays the bettor directly."""
        async with self._env.atomic("admin_claim_payout"):
            self._require_admin(caller)
            payout = await self._claim(pool_id, bettor)
        return self._finish_claim(pool_id, bettor, payout)

    def _finish_claim(self, pool_id: int, bettor: str, payout: int) -> int:
        if payout == 0:
            logger.info("bet_forfeited", pool_id=pool_id, bettor=bettor)
            raise NoPayoutError(pool_id=pool_id, bettor=bettor)
        logger.info("payout_claimed", pool_id=pool_id, bettor=bettor, payout=payout)
        return payout

    async def _claim(self, pool_id: int, bettor: str) -> int:
        pool = self._load_pool(pool_id)
        if pool.status != PoolStatus.SETTLED:
            raise PoolNotSettledError(pool_id=pool_id, status=pool.status.value)

        bet = self._load_bet(pool_id, bettor)
        if bet.claimed:
            raise AlreadyClaimedError(pool_id=pool_id, bettor=bettor)
        if pool.winner_side is None:
            raise InvalidWinnerError(pool_id=pool_id)

        if not bet.revealed or bet.side != pool.winner_side:
            # Forfeit is recorded so a retry reports already-claimed
            bet.claimed = True
            self._save_bet(pool_id, bet)
            return 0

        payout = bet.amount * PAYOUT_MULTIPLIER
        await self._ledger.transfer(self.address, bettor, payout)

        bet.claimed = True
        self._save_bet(pool_id, bet)
        self._publish("claim", pool_id, {"bettor": bettor, "payout": payout})
        return payout

    async def refund_pool(self, caller: str, pool_id: int) -> int:
        """
        Refund every unclaimed bet in full (admin only).

        Returns:
            Total refunded (amounts plus fees)
        """
        async with self._env.atomic("refund_pool"):
            self._require_admin(caller)
            pool = self._load_pool(pool_id)
            if pool.status.is_terminal:
                raise PoolAlreadySettledError(pool_id=pool_id, status=pool.status.value)

            refunded = 0
            for bettor in self.list_bettors(pool_id):
                bet: BetCommit | None = self._store.get(BetKey(pool_id, bettor))
                if bet is None or bet.claimed:
                    continue
                refund = bet.amount + bet.fee_paid
                await self._ledger.transfer(self.address, bettor, refund)
                bet.claimed = True
                self._save_bet(pool_id, bet)
                refunded += refund

            pool.status = PoolStatus.REFUNDED
            self._save_pool(pool)
            self._publish("refund", pool_id, pool.bet_count)

        logger.info("pool_refunded", pool_id=pool_id, bet_count=pool.bet_count, refunded=refunded)
        return refunded

    # =========================================================================
    # Treasury
    # =========================================================================

    async def sweep_treasury(self, caller: str) -> int:
        """Send accrued fees to the treasury, at most once per sweep interval."""
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

    async def set_zk_verifier(self, caller: str, verifier: str, vk_id: bytes) -> None:
        """Point zk settlement at a verifier contract and key id (admin only)."""
        async with self._env.atomic("set_zk_verifier"):
            self._require_admin(caller)
            self._store.set(ZkVerifierKey(), verifier)
            self._store.set(ZkVkIdKey(), bytes(vk_id))
        logger.info("zk_verifier_configured", contract=self.address, verifier=verifier, vk_id=bytes(vk_id).hex())

    # =========================================================================
    # Read helpers
    # =========================================================================

    def get_pool(self, pool_id: int) -> BetPool:
        return self._load_pool(pool_id)

    def get_bet(self, pool_id: int, bettor: str) -> BetCommit:
        return self._load_bet(pool_id, bettor)

    def get_pool_counter(self) -> int:
        return self._store.get(PoolCounterKey(), 0)

    def get_admin(self) -> str:
        return self._store.get(AdminKey())

    def get_treasury(self) -> str:
        return self._store.get(TreasuryKey())

    def get_fee_accrued(self) -> int:
        return self._fees.accrued()

    def get_zk_config(self) -> tuple[str | None, bytes | None]:
        return self._store.get(ZkVerifierKey()), self._store.get(ZkVkIdKey())

    def list_bettors(self, pool_id: int) -> list[str]:
        return self._store.get(PoolBettorsKey(pool_id), [])
