"""
Rotation request model.

A rotation request names the secret, the version being rotated (the client
request token) and one of the four rotation phases. Phases travel on the wire
as the literal step names used by AWS Secrets Manager rotation:

    1) createSecret  - generate a new version labeled AWSPENDING
    2) setSecret     - apply the pending credentials to the target service
    3) testSecret    - validate the pending credentials against the service
    4) finishSecret  - move AWSCURRENT onto the pending version

Example:
    >>> request = RotationRequest.from_event({
    ...     "SecretId": "arn:aws:secretsmanager:us-east-1:123:secret:db",
    ...     "ClientRequestToken": "c0ffee",
    ...     "Step": "createSecret",
    ... })
    >>> request.phase
    <Phase.GENERATE: 'createSecret'>
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from libs.rotation.exceptions import UnknownPhaseError


class Phase(str, Enum):
    """
    Rotation phases, in protocol order.

    Each phase is independently invocable; ordering is enforced by the
    caller, not by the rotator.
    """

    GENERATE = "createSecret"
    APPLY = "setSecret"
    VALIDATE = "testSecret"
    PROMOTE = "finishSecret"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, value: object) -> Phase:
        """
        Decode a wire value into a Phase.

        Raises:
            UnknownPhaseError: value is not one of the four step literals
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownPhaseError(value) from None


@dataclass(frozen=True)
class RotationRequest:
    """
    One rotation invocation.

    Attributes:
        secret_id: Secret ARN or name
        request_token: Version id under rotation (used for every idempotency check)
        phase: Rotation step to execute
    """

    secret_id: str
    request_token: str
    phase: Phase

    @classmethod
    def from_event(cls, event: Mapping[str, Any]) -> RotationRequest:
        """
        Decode an inbound rotation event.

        Raises:
            KeyError: a required field is missing
            UnknownPhaseError: Step is not a known phase
        """
        secret_id = event["SecretId"]
        phase = event["Step"]
        try:
            parsed = Phase.parse(phase)
        except UnknownPhaseError as e:
            raise UnknownPhaseError(phase, secret_id=secret_id) from e
        return cls(
            secret_id=secret_id,
            request_token=event["ClientRequestToken"],
            phase=parsed,
        )

    def to_event(self) -> dict[str, str]:
        """Encode back into the wire shape."""
        return {
            "SecretId": self.secret_id,
            "ClientRequestToken": self.request_token,
            "Step": self.phase.value,
        }
