"""Transaction-aborting faults and their fixed reason strings.

Every failure inside a transaction is raised as a ``Revert`` (or one of its
taxonomy subclasses). The ledger catches it at the transaction boundary,
restores the pre-call state and re-raises, so callers always see the
reason string and never a partially applied call.
"""

from __future__ import annotations
from typing import Any, Optional


class Revert(Exception):
    """A fault that aborts the whole transaction.

    Args:
        reason: Fixed reason string, e.g. ``"Incorrect ETH amount!"``
        details: Structured context for debugging and receipts
    """

    def __init__(self, reason: str, details: Optional[dict[str, Any]] = None) -> None:
        self.reason = reason
        self.details: dict[str, Any] = details or {}
        super().__init__(reason)

    @property
    def category(self) -> str:
        return "revert"

    def to_dict(self) -> dict[str, Any]:
        """Convert to a dict for receipts and handler results."""
        return {
            "error_type": self.__class__.__name__,
            "category": self.category,
            "reason": self.reason,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(reason={self.reason!r}, details={self.details!r})"


class AuthorizationFault(Revert):
    """Caller lacks ownership, approval, operator, game-master or owner rights."""

    @property
    def category(self) -> str:
        return "authorization"


class StateFault(Revert):
    """Operation is invalid for the current entity state."""

    @property
    def category(self) -> str:
        return "state"


class PaymentFault(Revert):
    """Attached value does not match what the call requires."""

    @property
    def category(self) -> str:
        return "payment"


class InvariantFault(Revert):
    """Malformed input or an arithmetic invariant would break."""

    @property
    def category(self) -> str:
        return "invariant"


# Ownable
NOT_OWNER = "Ownable: caller is not the owner"
NEW_OWNER_IS_ZERO = "Ownable: new owner is the zero address"

# NFT surface
TRANSFER_NOT_APPROVED = "TransferCallerNotOwnerNorApproved()"
NONEXISTENT_TOKEN = "OwnerQueryForNonexistentToken()"
APPROVAL_QUERY_NONEXISTENT = "ApprovalQueryForNonexistentToken()"
TRANSFER_FROM_INCORRECT_OWNER = "TransferFromIncorrectOwner()"
TRANSFER_TO_ZERO = "TransferToZeroAddress()"
APPROVAL_NOT_OWNER = "ApprovalCallerNotOwnerNorApproved()"
APPROVAL_TO_CURRENT_OWNER = "ApprovalToCurrentOwner()"
APPROVE_TO_CALLER = "ApproveToCaller()"
BALANCE_QUERY_ZERO = "BalanceQueryForZeroAddress()"
MINT_ZERO_QUANTITY = "MintZeroQuantity()"
MINT_TO_ZERO = "MintToZeroAddress()"

# Warrior
SALE_NOT_LIVE = "Sale is not live!"
INCORRECT_PAYMENT = "Incorrect ETH amount!"
NOT_STAKER = "Not your warrior!"
NOT_SCOUTING = "Warrior is not scouting!"
ALREADY_SCOUTING = "Warrior is already scouting!"
CLAIM_TOO_EARLY = "Land claim time not reached!"
CONTRACTS_NOT_SET = "Contracts not set!"
NO_WARRIORS = "No warriors given!"

# Land
NOT_ALLOWED_MINTER = "NotAllowedMinter()"

# RESOURCE
NOT_GAME_MASTER = "NotGameMaster()"
INSUFFICIENT_BALANCE = "InsufficientBalance()"
INSUFFICIENT_ALLOWANCE = "InsufficientAllowance()"
ARRAY_LENGTH_MISMATCH = "Array length mismatch!"

# Ledger
INSUFFICIENT_FUNDS = "Insufficient funds for transfer"
NON_PAYABLE = "Function is not payable"
NOT_EXTERNAL_SENDER = "Sender is not an externally owned account"
UNKNOWN_METHOD = "Unknown method"
UNKNOWN_CONTRACT = "No contract at address"
INVALID_ARGUMENT = "Invalid argument"
NOT_A_VIEW = "Method is not a view"
