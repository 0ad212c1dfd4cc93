"""
Abstract SecretStore Interface for the Rotation Executor.

The rotator never talks to a backend directly; it drives a versioned, staged
key-value store through this contract so the state machine can be exercised
against an in-memory store in tests and against AWS Secrets Manager in
production.

Architecture:
    SecretStore (ABC)
    └── AWSSecretStore - AWS Secrets Manager via boto3 (aws_store.py)

Stage labels:
    - AWSCURRENT: the version applications read
    - AWSPENDING: the version being rotated in
    - AWSPREVIOUS: assigned by the store to the prior current version on
      promotion (never read by the rotator)

A secret has at most one version per stage label; a version may carry zero
or more labels at once.

Every method takes a keyword-only ``timeout`` in seconds. Implementations
MUST bound the call by it and MUST NOT retry internally; the invocation
caller owns retry policy.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from libs.rotation.exceptions import (
    StageNotFoundError,  # noqa: F401 - Used in docstrings for documentation
    StoreAccessError,  # noqa: F401 - Used in docstrings for documentation
    StoreWriteError,  # noqa: F401 - Used in docstrings for documentation
)
from libs.rotation.secret import Secret


class Stage(str, Enum):
    """Secret version stage labels."""

    CURRENT = "AWSCURRENT"
    PENDING = "AWSPENDING"
    PREVIOUS = "AWSPREVIOUS"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class StagedSecret:
    """A secret version as reported by the store for a given stage."""

    version_id: str
    secret: Secret


class SecretStore(ABC):
    """
    Abstract base class for versioned, staged secret stores.

    Implementations:
        - AWSSecretStore: AWS Secrets Manager via boto3

    Security:
        - NEVER log secret values; secret ids, stages and version ids only
    """

    @abstractmethod
    def fetch_staged(self, secret_id: str, stage: Stage, *, timeout: float) -> StagedSecret:
        """
        Fetch the version currently bearing ``stage``.

        Args:
            secret_id: Secret ARN or name
            stage: Stage label to look up
            timeout: Upper bound for the call, in seconds

        Returns:
            StagedSecret with the store-reported version id and raw secret

        Raises:
            StageNotFoundError: Secret missing or no version carries the stage
            StoreAccessError: Permission, network or SDK failure
        """

    @abstractmethod
    def put_pending(
        self,
        secret_id: str,
        version_id: str,
        secret: Secret,
        *,
        timeout: float,
    ) -> None:
        """
        Create or overwrite ``version_id`` and label it AWSPENDING.

        Binary secrets MUST be stored as binary payloads and text secrets as
        string payloads.

        Raises:
            StoreWriteError: Write rejected or failed
        """

    @abstractmethod
    def promote_to_current(
        self,
        secret_id: str,
        new_version_id: str,
        old_version_id: str,
        *,
        timeout: float,
    ) -> None:
        """
        Move AWSCURRENT from ``old_version_id`` to ``new_version_id``.

        The store performs any follow-up label bookkeeping (AWSPREVIOUS).

        Raises:
            StoreAccessError: Promotion rejected or failed
        """
