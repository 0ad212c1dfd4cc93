"""
Rotation service capability set.

The domain-specific part of a rotation (minting new credentials, pushing them
to a database, checking they work) is supplied by the caller as a single
RotationService value. Only ``generate`` is mandatory; every other slot is an
optional capability. A step whose capability is absent becomes a no-op.

Example:
    >>> def generate(current: Secret) -> Secret:
    ...     return TextSecret(mint_password())
    >>> def validate(pending: Secret) -> None:
    ...     connect_with(pending.value())
    >>> service = RotationService(generate=generate, validate=validate)
    >>> service.supports("apply")
    False
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, fields

from libs.rotation.secret import Secret

GenerateFn = Callable[[Secret], Secret]
ApplyFn = Callable[[Secret, Secret], None]
ValidateFn = Callable[[Secret], None]
PromoteHookFn = Callable[[Secret], None]
DecodeFn = Callable[[Secret], Secret]


@dataclass(frozen=True)
class RotationService:
    """
    Capabilities offered by a rotation service.

    Attributes:
        generate: Produce the new pending secret from the current one
        apply: Push (current, pending) to the target system (setSecret)
        validate: Check the pending secret works (testSecret)
        promote_hook: Run before AWSCURRENT moves (finishSecret)
        decode: Transform every fetched secret before other capabilities see it
    """

    generate: GenerateFn
    apply: ApplyFn | None = None
    validate: ValidateFn | None = None
    promote_hook: PromoteHookFn | None = None
    decode: DecodeFn | None = None

    def __post_init__(self) -> None:
        if not callable(self.generate):
            raise TypeError("generate capability is mandatory and must be callable")
        for field in fields(self):
            slot = getattr(self, field.name)
            if slot is not None and not callable(slot):
                raise TypeError(f"{field.name} capability must be callable or None")

    def supports(self, capability: str) -> bool:
        """Return True when the named capability slot is populated."""
        if capability not in CAPABILITIES:
            raise ValueError(f"Unknown capability: {capability!r}")
        return getattr(self, capability) is not None


CAPABILITIES = ("generate", "apply", "validate", "promote_hook", "decode")
