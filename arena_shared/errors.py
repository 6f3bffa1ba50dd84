"""
Error Taxonomy
==============

Every contract entrypoint raises a subclass of :class:`WagerError`.
Each error carries a stable numeric ``code`` (kept identical to the
on-chain contract error codes so indexers can decode both), a
snake_case ``error_code`` for API responses and an :class:`ErrorCategory`
telling callers whether a retry can help.

Version: 0.1.0
"""

from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Failure classes shared by all contracts."""

    NOT_FOUND = "not_found"
    STATE_VIOLATION = "state_violation"
    AUTHORIZATION = "authorization"
    VALIDATION = "validation"
    CRYPTOGRAPHIC = "cryptographic"
    ECONOMIC = "economic"


class WagerError(Exception):
    """Base class for contract failures."""

    code: int = 0
    error_code: str = "wager_error"
    category: ErrorCategory = ErrorCategory.VALIDATION
    message: str = "Contract call failed"

    def __init__(self, message: str | None = None, **details: Any) -> None:
        self.details = details
        super().__init__(message or self.message)

    @property
    def retryable(self) -> bool:
        """Whether resubmitting corrected input may succeed."""
        return self.category in (ErrorCategory.VALIDATION, ErrorCategory.CRYPTOGRAPHIC)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code,
            "error_code": self.error_code,
            "category": self.category.value,
            "message": str(self),
            "details": self.details,
        }


# =============================================================================
# Betting pool errors
# =============================================================================


class PoolNotFoundError(WagerError):
    code = 1
    error_code = "pool_not_found"
    category = ErrorCategory.NOT_FOUND
    message = "Pool not found"


class PoolNotOpenError(WagerError):
    code = 2
    error_code = "pool_not_open"
    category = ErrorCategory.STATE_VIOLATION
    message = "Pool is not open for bets"


class PoolNotLockedError(WagerError):
    code = 3
    error_code = "pool_not_locked"
    category = ErrorCategory.STATE_VIOLATION
    message = "Pool is not locked"


class PoolNotSettledError(WagerError):
    code = 4
    error_code = "pool_not_settled"
    category = ErrorCategory.STATE_VIOLATION
    message = "Pool is not settled"


class PoolAlreadySettledError(WagerError):
    code = 5
    error_code = "pool_already_settled"
    category = ErrorCategory.STATE_VIOLATION
    message = "Pool is already settled or refunded"


class PoolAlreadyLockedError(WagerError):
    code = 6
    error_code = "pool_already_locked"
    category = ErrorCategory.STATE_VIOLATION
    message = "Pool is already locked"


class AlreadyCommittedError(WagerError):
    code = 7
    error_code = "already_committed"
    category = ErrorCategory.STATE_VIOLATION
    message = "Bettor already has a bet in this pool"


class BetNotFoundError(WagerError):
    code = 8
    error_code = "bet_not_found"
    category = ErrorCategory.NOT_FOUND
    message = "Bet not found"


class AlreadyRevealedError(WagerError):
    code = 9
    error_code = "already_revealed"
    category = ErrorCategory.STATE_VIOLATION
    message = "Bet already revealed"


class InvalidRevealError(WagerError):
    code = 10
    error_code = "invalid_reveal"
    category = ErrorCategory.VALIDATION
    message = "Revealed side and salt do not match the commitment"


class InvalidAmountError(WagerError):
    code = 11
    error_code = "invalid_amount"
    category = ErrorCategory.VALIDATION
    message = "Amount is below the minimum"


class InvalidWinnerError(WagerError):
    code = 12
    error_code = "invalid_winner"
    category = ErrorCategory.STATE_VIOLATION
    message = "Pool has no winner recorded"


class NoPayoutError(WagerError):
    code = 13
    error_code = "no_payout"
    category = ErrorCategory.ECONOMIC
    message = "No payout due for this bet"


class AlreadyClaimedError(WagerError):
    code = 14
    error_code = "already_claimed"
    category = ErrorCategory.STATE_VIOLATION
    message = "Bet already claimed"


class UnauthorizedError(WagerError):
    code = 15
    error_code = "unauthorized"
    category = ErrorCategory.AUTHORIZATION
    message = "Caller is not authorized for this operation"


class ZkVerifierNotConfiguredError(WagerError):
    code = 16
    error_code = "zk_verifier_not_configured"
    category = ErrorCategory.STATE_VIOLATION
    message = "ZK verifier is not configured"


class ZkProofInvalidError(WagerError):
    code = 17
    error_code = "zk_proof_invalid"
    category = ErrorCategory.CRYPTOGRAPHIC
    message = "ZK proof rejected"


class BettingDeadlinePassedError(WagerError):
    code = 18
    error_code = "betting_deadline_passed"
    category = ErrorCategory.STATE_VIOLATION
    message = "Betting deadline has passed"


class NothingToSweepError(WagerError):
    code = 19
    error_code = "nothing_to_sweep"
    category = ErrorCategory.ECONOMIC
    message = "No accrued fees to sweep"


class SweepTooEarlyError(WagerError):
    code = 20
    error_code = "sweep_too_early"
    category = ErrorCategory.ECONOMIC
    message = "Treasury was swept too recently"


class InvalidCommitmentError(WagerError):
    code = 21
    error_code = "invalid_commitment"
    category = ErrorCategory.VALIDATION
    message = "Commitment must be 32 bytes"


class InvalidMatchRefError(WagerError):
    code = 22
    error_code = "invalid_match_ref"
    category = ErrorCategory.VALIDATION
    message = "Match reference must be a 32-byte BN254 scalar"


# =============================================================================
# Verifier errors
# =============================================================================


class InvalidVerificationKeyError(WagerError):
    code = 101
    error_code = "invalid_vk"
    category = ErrorCategory.VALIDATION
    message = "Verification key material is invalid"


class VerificationKeyNotFoundError(WagerError):
    code = 102
    error_code = "vk_not_found"
    category = ErrorCategory.NOT_FOUND
    message = "Verification key not found"


# =============================================================================
# Match (round gate) errors
# =============================================================================


class MatchNotFoundError(WagerError):
    code = 201
    error_code = "match_not_found"
    category = ErrorCategory.NOT_FOUND
    message = "Match not found"


class NotPlayerError(WagerError):
    code = 202
    error_code = "not_player"
    category = ErrorCategory.AUTHORIZATION
    message = "Address is not a participant in this match"


class MatchAlreadyEndedError(WagerError):
    code = 203
    error_code = "match_already_ended"
    category = ErrorCategory.STATE_VIOLATION
    message = "Match has already ended"


class InvalidMatchError(WagerError):
    code = 204
    error_code = "invalid_match"
    category = ErrorCategory.VALIDATION
    message = "Match parameters are invalid"


class StakeNotConfiguredError(WagerError):
    code = 205
    error_code = "stake_not_configured"
    category = ErrorCategory.STATE_VIOLATION
    message = "No stake configured for this match"


class StakeAlreadyPaidError(WagerError):
    code = 206
    error_code = "stake_already_paid"
    category = ErrorCategory.STATE_VIOLATION
    message = "Stake already deposited"


class InvalidSlotError(WagerError):
    code = 207
    error_code = "invalid_slot"
    category = ErrorCategory.VALIDATION
    message = "Round and turn must be positive integers"


class CommitmentConflictError(WagerError):
    code = 208
    error_code = "commitment_conflict"
    category = ErrorCategory.STATE_VIOLATION
    message = "A different commitment is already recorded for this slot"


class CommitmentNotFoundError(WagerError):
    code = 209
    error_code = "commitment_not_found"
    category = ErrorCategory.NOT_FOUND
    message = "No commitment recorded for this slot"


class CommitmentMismatchError(WagerError):
    code = 210
    error_code = "commitment_mismatch"
    category = ErrorCategory.VALIDATION
    message = "Opened commitment does not match the recorded commitment"


class OutcomeAlreadySubmittedError(WagerError):
    code = 211
    error_code = "outcome_already_submitted"
    category = ErrorCategory.STATE_VIOLATION
    message = "Match outcome already submitted"


class ZkGateUnsatisfiedError(WagerError):
    code = 212
    error_code = "zk_gate_unsatisfied"
    category = ErrorCategory.STATE_VIOLATION
    message = "ZK gate requirements are not met"


class ZkOutcomeMismatchError(WagerError):
    code = 213
    error_code = "zk_outcome_mismatch"
    category = ErrorCategory.CRYPTOGRAPHIC
    message = "Finalized winner does not match the proven outcome"


# =============================================================================
# Ledger errors
# =============================================================================


class InsufficientBalanceError(WagerError):
    code = 301
    error_code = "insufficient_balance"
    category = ErrorCategory.ECONOMIC
    message = "Insufficient balance for transfer"


class HubCallFailedError(WagerError):
    code = 302
    error_code = "hub_call_failed"
    category = ErrorCategory.STATE_VIOLATION
    message = "Game hub rejected the call"
