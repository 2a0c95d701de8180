"""Shared test fixtures for radix_utils tests."""
# Mock client fixtures
from .mock_clients import mock_gateway

# Canned gateway responses and constants
from .mock_data import (
    TEST_ACCOUNT_ADDRESS,
    TEST_VALIDATOR_ADDRESS,
    TEST_STAKE_UNIT_ADDRESS,
    TEST_CLAIM_NFT_ADDRESS,
    TEST_STAKE_XRD_VAULT,
    TEST_PENDING_XRD_WITHDRAW_VAULT,
    TEST_LOCKED_OWNER_LSU_VAULT,
    TEST_PENDING_OWNER_LSU_UNLOCK_VAULT,
    TEST_EPOCH,
    TEST_STATE_VERSION,
)

__all__ = [
    # Fixtures
    'mock_gateway',
    # Constants
    'TEST_ACCOUNT_ADDRESS',
    'TEST_VALIDATOR_ADDRESS',
    'TEST_STAKE_UNIT_ADDRESS',
    'TEST_CLAIM_NFT_ADDRESS',
    'TEST_STAKE_XRD_VAULT',
    'TEST_PENDING_XRD_WITHDRAW_VAULT',
    'TEST_LOCKED_OWNER_LSU_VAULT',
    'TEST_PENDING_OWNER_LSU_UNLOCK_VAULT',
    'TEST_EPOCH',
    'TEST_STATE_VERSION',
]
