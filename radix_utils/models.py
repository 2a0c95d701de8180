from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Any


class AggregationLevel(Enum):
    """Granularity at which the gateway reports resource balances."""
    GLOBAL = "Global"
    VAULT = "Vault"


@dataclass(frozen=True)
class LedgerStateVersion:
    """Ledger snapshot returned alongside every gateway state query."""
    epoch: int
    network: str
    proposer_round_timestamp: str
    round: int
    state_version: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LedgerStateVersion':
        return cls(
            epoch=data['epoch'],
            network=data.get('network', ''),
            proposer_round_timestamp=data.get('proposer_round_timestamp', ''),
            round=data.get('round', 0),
            state_version=data.get('state_version', 0),
        )


@dataclass(frozen=True)
class UnlockingReward:
    """A pending owner stake unit withdrawal."""
    epoch_unlocked: int
    stake_unit_amount: str  # Decimal string

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UnlockingReward':
        return cls(
            epoch_unlocked=int(data['epoch_unlocked']),
            stake_unit_amount=str(data['stake_unit_amount']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "epoch_unlocked": self.epoch_unlocked,
            "stake_unit_amount": self.stake_unit_amount,
        }


@dataclass(frozen=True)
class NewFeeFactor:
    """A requested validator fee change and the epoch it takes effect."""
    new_fee_factor: str
    epoch_effective: int

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'NewFeeFactor':
        return cls(
            new_fee_factor=str(data['new_fee_factor']),
            epoch_effective=int(data['epoch_effective']),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "new_fee_factor": self.new_fee_factor,
            "epoch_effective": self.epoch_effective,
        }


@dataclass(frozen=True)
class FeeFactor:
    """
    Validator fee as a percentage string.

    about_to_change is only set while a requested change is still in the
    future; once its epoch is reached the new value is reported as current.
    """
    current: str
    about_to_change: Optional[NewFeeFactor] = None
    alert: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "aboutToChange": self.about_to_change.to_dict() if self.about_to_change else None,
            "alert": self.alert,
        }


@dataclass(frozen=True)
class ValidatorVaults:
    """Addresses of the four vaults owned by a validator component."""
    currently_earned_lsu_vault_address: str = ""
    owner_unlocking_lsu_vault_address: str = ""
    total_staked_xrd_vault_address: str = ""
    unstaking_xrd_vault_address: str = ""

    def to_dict(self) -> Dict[str, str]:
        return {
            "NODE_CURRENTLY_EARNED_LSU_VAULT_ADDRESS": self.currently_earned_lsu_vault_address,
            "NODE_OWNER_UNLOCKING_LSU_VAULT_ADDRESS": self.owner_unlocking_lsu_vault_address,
            "NODE_TOTAL_STAKED_XRD_VAULT_ADDRESS": self.total_staked_xrd_vault_address,
            "NODE_UNSTAKING_XRD_VAULT_ADDRESS": self.unstaking_xrd_vault_address,
        }


@dataclass(frozen=True)
class ValidatorInfo:
    """Aggregated validator state at a single ledger epoch."""
    currently_earned_locked_lsus: str
    owner_lsus_in_unlocking_process: str
    total_staked_xrds: str
    total_xrds_leaving_our_node: str
    unlocking_lsus_breakdown: List[UnlockingReward]  # Only withdrawals still locked
    epoch: int
    unlocked_lsus: str
    metadata: Dict[str, str]
    stake_unit_address: str
    vaults: ValidatorVaults
    validator_address: str
    fees: FeeFactor

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentlyEarnedLockedLSUs": self.currently_earned_locked_lsus,
            "ownerLSUsInUnlockingProcess": self.owner_lsus_in_unlocking_process,
            "totalStakedXrds": self.total_staked_xrds,
            "totalXrdsLeavingOurNode": self.total_xrds_leaving_our_node,
            "unlockingLSUsBreakdown": [r.to_dict() for r in self.unlocking_lsus_breakdown],
            "epoch": self.epoch,
            "unlockedLSUs": self.unlocked_lsus,
            "metadata": dict(self.metadata),
            "stakeUnitAddress": self.stake_unit_address,
            "vaults": self.vaults.to_dict(),
            "validatorAddress": self.validator_address,
            "fees": self.fees.to_dict(),
        }


@dataclass(frozen=True)
class ResourceCheckResult:
    """Holdings of one fungible resource across a set of accounts."""
    users_with_resource_amount: Dict[str, str]
    total_amount: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "usersWithResourceAmount": dict(self.users_with_resource_amount),
            "totalAmount": self.total_amount,
        }


@dataclass(frozen=True)
class FungibleBalance:
    token_address: str
    amount: str

    def to_dict(self) -> Dict[str, str]:
        return {"tokenAddress": self.token_address, "amount": self.amount}


@dataclass(frozen=True)
class NonFungibleBalance:
    collection_address: str
    ids: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {"collectionAddress": self.collection_address, "ids": list(self.ids)}


@dataclass(frozen=True)
class WalletBalances:
    """Positive fungible balances and non-empty NFT collections of a wallet."""
    fungible: Dict[str, FungibleBalance] = field(default_factory=dict)
    non_fungible: Dict[str, NonFungibleBalance] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "fungible": {k: v.to_dict() for k, v in self.fungible.items()},
            "nonFungible": {k: v.to_dict() for k, v in self.non_fungible.items()},
        }


@dataclass(frozen=True)
class UnstakeClaimNFT:
    """Programmatic data of a single unstake claim NFT."""
    nft_id: str
    claim_amount: Optional[str] = None
    claim_epoch: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"nftId": self.nft_id}
        if self.claim_amount is not None:
            data["claim_amount"] = self.claim_amount
        if self.claim_epoch is not None:
            data["claim_epoch"] = self.claim_epoch
        return data


# Keyed by non-fungible id
UnstakeClaimNFTData = Dict[str, UnstakeClaimNFT]
