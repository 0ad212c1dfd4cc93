"""
Secret Rotation Exception Hierarchy.

This module defines all exceptions raised while executing a rotation step,
providing clear error semantics for malformed requests, secret store
failures, and failures surfaced by the pluggable rotation service.

Exception hierarchy:
    RotationError (base)
    ├── UnknownPhaseError - Phase value is not one of the four rotation steps
    ├── StoreError - Any failure from the secret store
    │   ├── StageNotFoundError - No version carries the requested stage label
    │   ├── StoreAccessError - Permission/network/SDK failure on read or promotion
    │   ├── StoreWriteError - Failed to write the pending version
    │   └── StoreTimeoutError - Invocation deadline exhausted before a store call
    └── CapabilityError - Failure raised by a rotation service capability

All exceptions include structured context (secret id, stage or capability)
without exposing secret values.
"""


class RotationError(Exception):
    """
    Base exception for all rotation errors.

    Subclasses MUST NOT include secret values in error messages. Only secret
    ids, stage labels and version ids are safe to report.

    Attributes:
        secret_id: Identifier of the secret under rotation (ARN or name)
        message: Human-readable error message (MUST NOT include secret value)

    Example:
        >>> try:
        ...     rotator.handle(request)
        ... except RotationError as e:
        ...     logger.error("Rotation failed", extra={"secret_id": e.secret_id})
    """

    def __init__(self, message: str, secret_id: str | None = None) -> None:
        super().__init__(message)
        self.secret_id = secret_id
        self.message = message

    def __str__(self) -> str:
        """
        Format error message with the secret id when known.

        Example:
            >>> str(RotationError("Timeout", "prod/db"))
            'Timeout (secret: prod/db)'
        """
        if self.secret_id:
            return f"{self.message} (secret: {self.secret_id})"
        return self.message


class UnknownPhaseError(RotationError):
    """
    Raised when a rotation request names a phase outside the four known steps.

    Raised before any secret store access is attempted.

    Example:
        >>> Phase.parse("rotateSecret")
        UnknownPhaseError: Unknown rotation phase: 'rotateSecret'
    """

    def __init__(self, phase: object, secret_id: str | None = None) -> None:
        self.phase = phase
        super().__init__(f"Unknown rotation phase: {phase!r}", secret_id=secret_id)


class StoreError(RotationError):
    """
    Base class for failures reported by the secret store.

    Attributes:
        stage: Stage label involved in the failed call, if any
        reason: Specific failure reason
    """

    def __init__(
        self,
        secret_id: str,
        reason: str,
        stage: str | None = None,
    ) -> None:
        if not isinstance(secret_id, str) or not secret_id:
            raise TypeError("secret_id must be a non-empty string")
        if not isinstance(reason, str) or not reason:
            raise TypeError("reason must be a non-empty string")

        self.stage = stage
        self.reason = reason
        message = f"Secret store error: {reason}"
        if stage:
            message += f" [stage: {stage}]"
        super().__init__(message, secret_id=secret_id)


class StageNotFoundError(StoreError):
    """
    Raised when the secret does not exist or no version carries the stage.

    Common causes:
    - Secret deleted or misspelled secret id
    - Pending stage requested before the generate step ran

    Example:
        >>> store.fetch_staged("prod/db", Stage.PENDING, timeout=1.0)
        StageNotFoundError: Secret store error: no version labeled AWSPENDING
    """


class StoreAccessError(StoreError):
    """
    Raised when the store rejects or cannot serve a read or promotion.

    Common causes:
    - Missing secretsmanager:GetSecretValue / UpdateSecretVersionStage permission
    - Network timeout or throttling (no internal retry, caller re-delivers)
    - Secret marked for deletion
    """


class StoreWriteError(StoreError):
    """
    Raised when writing the pending version fails.

    Common causes:
    - Missing secretsmanager:PutSecretValue permission
    - Version id already used with a different value
    - Network failure during write
    """


class StoreTimeoutError(StoreError):
    """Raised when the invocation deadline leaves no time for a store call."""


class CapabilityError(RotationError):
    """
    Raised when a rotation service capability fails.

    Wraps exceptions raised by generate/apply/validate/promote_hook/decode.
    The original exception is available as ``__cause__``.

    Attributes:
        capability: Name of the failing capability (e.g., "validate")
    """

    def __init__(self, capability: str, secret_id: str, reason: str) -> None:
        self.capability = capability
        super().__init__(
            f"Rotation service '{capability}' failed: {reason}",
            secret_id=secret_id,
        )
