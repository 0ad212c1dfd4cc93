"""Shared test fixtures: an in-memory secret store and a recording rotation service."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pytest

from libs.rotation.exceptions import StageNotFoundError
from libs.rotation.secret import Secret, TextSecret
from libs.rotation.service import RotationService
from libs.rotation.store import SecretStore, Stage, StagedSecret


class FakeSecretStore(SecretStore):
    """In-memory SecretStore recording every call (stage -> (version_id, secret))."""

    def __init__(self, staged: dict[Stage, tuple[str, Secret]] | None = None) -> None:
        self.staged: dict[Stage, tuple[str, Secret]] = dict(staged or {})
        self.lookups: list[tuple[str, Stage, float]] = []
        self.puts: list[tuple[str, str, Secret, float]] = []
        self.promotions: list[tuple[str, str, str, float]] = []

    @property
    def calls(self) -> int:
        return len(self.lookups) + len(self.puts) + len(self.promotions)

    def fetch_staged(self, secret_id: str, stage: Stage, *, timeout: float) -> StagedSecret:
        self.lookups.append((secret_id, stage, timeout))
        if stage not in self.staged:
            raise StageNotFoundError(
                secret_id=secret_id,
                stage=str(stage),
                reason=f"no version labeled {stage}",
            )
        version_id, secret = self.staged[stage]
        return StagedSecret(version_id=version_id, secret=secret)

    def put_pending(
        self,
        secret_id: str,
        version_id: str,
        secret: Secret,
        *,
        timeout: float,
    ) -> None:
        self.puts.append((secret_id, version_id, secret, timeout))
        self.staged[Stage.PENDING] = (version_id, secret)

    def promote_to_current(
        self,
        secret_id: str,
        new_version_id: str,
        old_version_id: str,
        *,
        timeout: float,
    ) -> None:
        self.promotions.append((secret_id, new_version_id, old_version_id, timeout))


@dataclass
class RecordingService:
    """Records every capability call; ``build`` selects which slots are offered."""

    on_generate: Secret = field(default_factory=lambda: TextSecret("new"))
    generated: list[Secret] = field(default_factory=list)
    applied: list[tuple[Secret, Secret]] = field(default_factory=list)
    validated: list[Secret] = field(default_factory=list)
    hooked: list[Secret] = field(default_factory=list)
    decoded: list[Secret] = field(default_factory=list)
    failures: dict[str, Exception] = field(default_factory=dict)

    def _maybe_fail(self, capability: str) -> None:
        if capability in self.failures:
            raise self.failures[capability]

    def generate(self, current: Secret) -> Secret:
        self.generated.append(current)
        self._maybe_fail("generate")
        return self.on_generate

    def apply(self, current: Secret, pending: Secret) -> None:
        self.applied.append((current, pending))
        self._maybe_fail("apply")

    def validate(self, pending: Secret) -> None:
        self.validated.append(pending)
        self._maybe_fail("validate")

    def promote_hook(self, pending: Secret) -> None:
        self.hooked.append(pending)
        self._maybe_fail("promote_hook")

    def decode(self, secret: Secret) -> Secret:
        self.decoded.append(secret)
        self._maybe_fail("decode")
        return secret

    def build(self, *capabilities: str) -> RotationService:
        slots: dict[str, Any] = {name: getattr(self, name) for name in capabilities}
        return RotationService(generate=self.generate, **slots)


@pytest.fixture()
def recorder() -> RecordingService:
    return RecordingService()


@pytest.fixture()
def make_store() -> type[FakeSecretStore]:
    return FakeSecretStore
