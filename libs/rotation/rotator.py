"""
Secret rotation coordinator.

SecretRotator executes one rotation step per call. The four steps mirror the
AWS Secrets Manager rotation protocol and every step is safe to re-deliver:

    createSecret (GENERATE)
        AWSCURRENT already at the token -> no-op.
        Otherwise generate() a new secret and store it at the token as AWSPENDING.
    setSecret (APPLY)       [only when the service offers apply]
        AWSCURRENT already at the token -> no-op.
        AWSPENDING not at the token -> no-op.
        Otherwise apply(current, pending).
    testSecret (VALIDATE)   [only when the service offers validate]
        AWSPENDING not at the token -> no-op.
        Otherwise validate(pending).
    finishSecret (PROMOTE)
        If the service offers promote_hook and AWSPENDING is at the token,
        run the hook first; a hook failure aborts the step.
        Then always move AWSCURRENT onto the token.

Version comparisons always use the store-reported version id. When the service
offers decode, every fetched secret passes through it before any other
capability sees it.

The rotator holds no per-invocation state on the instance, takes no locks and
never retries: concurrent or repeated invocations are made safe by the version
checks alone, and failures propagate to the caller, which owns retry policy.

Example:
    >>> rotator = SecretRotator(store=AWSSecretStore(), service=service)
    >>> rotator.handle(RotationRequest("prod/db", "c0ffee", Phase.GENERATE))
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from libs.common.logging import ContextAdapter
from libs.rotation.exceptions import (
    CapabilityError,
    RotationError,
    StoreTimeoutError,
    UnknownPhaseError,
)
from libs.rotation.request import Phase, RotationRequest
from libs.rotation.secret import BinarySecret, Secret, TextSecret
from libs.rotation.service import RotationService
from libs.rotation.store import SecretStore, Stage, StagedSecret

logger = logging.getLogger(__name__)

DEFAULT_NETWORK_TIMEOUT_SECONDS = 1.0

RemainingTime = Callable[[], float]


@dataclass(frozen=True)
class _Invocation:
    """Per-call state threaded through the step handlers."""

    request: RotationRequest
    log: ContextAdapter
    remaining_time: RemainingTime | None


class SecretRotator:
    """
    Executes rotation steps against a SecretStore on behalf of a RotationService.

    Attributes:
        network_timeout: Upper bound, in seconds, for each store call
    """

    def __init__(
        self,
        store: SecretStore,
        service: RotationService,
        network_timeout: float = DEFAULT_NETWORK_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize the rotator.

        Args:
            store: Secret store collaborator
            service: Rotation capability set (generate is mandatory)
            network_timeout: Per store call timeout in seconds. Non-positive
                values fall back to DEFAULT_NETWORK_TIMEOUT_SECONDS.
        """
        self._store = store
        self._service = service
        self.network_timeout = (
            network_timeout if network_timeout > 0 else DEFAULT_NETWORK_TIMEOUT_SECONDS
        )
        self._steps: dict[Phase, Callable[[_Invocation], None]] = {
            Phase.GENERATE: self._generate,
            Phase.APPLY: self._apply,
            Phase.VALIDATE: self._validate,
            Phase.PROMOTE: self._promote,
        }

    def handle(
        self,
        request: RotationRequest,
        remaining_time: RemainingTime | None = None,
    ) -> None:
        """
        Execute the rotation step named by ``request.phase``.

        Skips mandated by the protocol (already current, pending not at the
        token, capability absent) return normally, exactly like a step that
        did its work; only the logs tell them apart.

        Args:
            request: Rotation request
            remaining_time: Optional callable returning the seconds left in
                the caller's budget (e.g., the Lambda invocation deadline).
                Each store call is bounded by min(network_timeout, remaining).

        Raises:
            UnknownPhaseError: Phase is not one of the four steps (no store access)
            StoreError: Secret store failure
            CapabilityError: Rotation service failure
        """
        try:
            phase = Phase.parse(request.phase)
        except UnknownPhaseError as e:
            logger.error(
                "Rejected rotation request with unknown phase",
                extra={"context": {"secret_id": request.secret_id, "phase": str(request.phase)}},
            )
            raise UnknownPhaseError(request.phase, secret_id=request.secret_id) from e

        call = _Invocation(
            request=request,
            log=ContextAdapter(
                logger,
                {
                    "secret_id": request.secret_id,
                    "phase": phase.value,
                    "request_token": request.request_token,
                },
            ),
            remaining_time=remaining_time,
        )
        call.log.info("Evaluating rotation for secret version")
        self._steps[phase](call)

    def _generate(self, call: _Invocation) -> None:
        current = self._secret_by_stage(call, Stage.CURRENT)
        if current.version_id == call.request.request_token:
            call.log.info("AWSCURRENT is already set to the requested version")
            return

        pending = self._invoke(call, "generate", self._service.generate, current.secret)
        if not isinstance(pending, (TextSecret, BinarySecret)):
            raise CapabilityError(
                "generate",
                secret_id=call.request.secret_id,
                reason=(
                    f"returned {type(pending).__name__}, expected TextSecret or BinarySecret"
                ),
            )
        self._put_pending(call, pending)

    def _apply(self, call: _Invocation) -> None:
        apply = self._service.apply
        if apply is None:
            call.log.info("Service does not handle the apply step")
            return

        current = self._secret_by_stage(call, Stage.CURRENT)
        if current.version_id == call.request.request_token:
            call.log.info("AWSCURRENT is already set to the requested version")
            return

        pending = self._secret_by_stage(call, Stage.PENDING)
        if not self._is_requested_pending(call, pending):
            return

        self._invoke(call, "apply", apply, current.secret, pending.secret)
        call.log.info("Pending secret applied")

    def _validate(self, call: _Invocation) -> None:
        validate = self._service.validate
        if validate is None:
            call.log.info("Service does not handle the validate step")
            return

        pending = self._secret_by_stage(call, Stage.PENDING)
        if not self._is_requested_pending(call, pending):
            return

        self._invoke(call, "validate", validate, pending.secret)
        call.log.info("Pending secret validated")

    def _promote(self, call: _Invocation) -> None:
        promote_hook = self._service.promote_hook
        if promote_hook is None:
            call.log.info("Service does not handle the promote hook")
        else:
            pending = self._secret_by_stage(call, Stage.PENDING)
            if self._is_requested_pending(call, pending):
                self._invoke(call, "promote_hook", promote_hook, pending.secret)

        self._promote_to_current(call)

    def _is_requested_pending(self, call: _Invocation, pending: StagedSecret) -> bool:
        if pending.version_id != call.request.request_token:
            call.log.info(
                "AWSPENDING is not set to the requested version",
                extra={"context": {"pending_version_id": pending.version_id}},
            )
            return False
        return True

    def _secret_by_stage(self, call: _Invocation, stage: Stage) -> StagedSecret:
        """Fetch the version bearing ``stage`` and run it through decode."""
        staged = self._store.fetch_staged(
            call.request.secret_id,
            stage,
            timeout=self._store_timeout(call, stage),
        )

        decode = self._service.decode
        if decode is None:
            return staged
        secret = self._invoke(call, "decode", decode, staged.secret)
        return StagedSecret(version_id=staged.version_id, secret=secret)

    def _put_pending(self, call: _Invocation, secret: Secret) -> None:
        self._store.put_pending(
            call.request.secret_id,
            call.request.request_token,
            secret,
            timeout=self._store_timeout(call, Stage.PENDING),
        )
        call.log.info(
            "Stored new secret version as AWSPENDING",
            extra={"context": {"binary": secret.is_binary}},
        )

    def _promote_to_current(self, call: _Invocation) -> None:
        current = self._secret_by_stage(call, Stage.CURRENT)
        self._store.promote_to_current(
            call.request.secret_id,
            call.request.request_token,
            current.version_id,
            timeout=self._store_timeout(call, Stage.CURRENT),
        )
        call.log.info(
            "Moved AWSCURRENT to the requested version",
            extra={"context": {"previous_version_id": current.version_id}},
        )

    def _store_timeout(self, call: _Invocation, stage: Stage) -> float:
        """Bound the next store call by the network timeout and the caller's budget."""
        if call.remaining_time is None:
            return self.network_timeout

        remaining = call.remaining_time()
        if remaining <= 0:
            raise StoreTimeoutError(
                secret_id=call.request.secret_id,
                stage=str(stage),
                reason="invocation deadline exhausted before store call",
            )
        return min(self.network_timeout, remaining)

    def _invoke(
        self, call: _Invocation, capability: str, fn: Callable[..., Any], *args: Any
    ) -> Any:
        try:
            return fn(*args)
        except RotationError:
            call.log.warning(
                "Rotation service capability failed",
                extra={"context": {"capability": capability}},
            )
            raise
        except Exception as e:
            call.log.warning(
                "Rotation service capability failed",
                extra={"context": {"capability": capability, "error_type": type(e).__name__}},
            )
            raise CapabilityError(
                capability,
                secret_id=call.request.secret_id,
                reason=f"{type(e).__name__}: {e}",
            ) from e
