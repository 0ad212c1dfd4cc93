"""
Secret Rotation Executor.

This package executes the four-step AWS Secrets Manager rotation protocol
(createSecret, setSecret, testSecret, finishSecret) on behalf of a pluggable
rotation service, owning the version bookkeeping that makes every step safe to
re-deliver.

Architecture:
    - SecretRotator: step dispatcher and idempotency checks (rotator.py)
    - RotationService: mandatory generate + optional apply/validate/
      promote_hook/decode capabilities (service.py)
    - SecretStore: staged, versioned store contract (store.py)
    - AWSSecretStore: boto3 implementation (aws_store.py)
    - TextSecret / BinarySecret: secret payload variants (secret.py)
    - json_decoder: pydantic-backed JSON decode capability (json_secret.py)

Quick Start:
    >>> from libs.rotation import RotationRequest, RotationService, TextSecret, create_rotator
    >>> service = RotationService(generate=lambda current: TextSecret(mint_password()))
    >>> rotator = create_rotator(service)
    >>> rotator.handle(RotationRequest.from_event(event))

Security Requirements:
    - Secret values NEVER logged (only secret ids, stages and version ids)
    - No internal retries; the invocation caller re-delivers failed steps
"""

from libs.rotation.aws_store import AWSSecretStore
from libs.rotation.exceptions import (
    CapabilityError,
    RotationError,
    StageNotFoundError,
    StoreAccessError,
    StoreError,
    StoreTimeoutError,
    StoreWriteError,
    UnknownPhaseError,
)
from libs.rotation.factory import create_rotator, create_secret_store
from libs.rotation.json_secret import JsonSecret, json_decoder
from libs.rotation.request import Phase, RotationRequest
from libs.rotation.rotator import DEFAULT_NETWORK_TIMEOUT_SECONDS, SecretRotator
from libs.rotation.secret import BinarySecret, Secret, TextSecret, secret_from_response
from libs.rotation.service import RotationService
from libs.rotation.store import SecretStore, Stage, StagedSecret

__all__ = [
    # Coordinator
    "SecretRotator",
    "DEFAULT_NETWORK_TIMEOUT_SECONDS",
    "create_rotator",
    # Request model
    "Phase",
    "RotationRequest",
    # Capabilities
    "RotationService",
    "json_decoder",
    # Secret values
    "Secret",
    "TextSecret",
    "BinarySecret",
    "JsonSecret",
    "secret_from_response",
    # Store
    "SecretStore",
    "Stage",
    "StagedSecret",
    "AWSSecretStore",
    "create_secret_store",
    # Exceptions (callers should catch these)
    "RotationError",
    "UnknownPhaseError",
    "StoreError",
    "StageNotFoundError",
    "StoreAccessError",
    "StoreWriteError",
    "StoreTimeoutError",
    "CapabilityError",
]
