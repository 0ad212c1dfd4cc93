"""Tests for the RotationService capability set."""

from typing import get_type_hints

import pytest

from libs.rotation.secret import TextSecret
from libs.rotation.service import (
    CAPABILITIES,
    ApplyFn,
    DecodeFn,
    RotationService,
)


def _generate(current):
    return TextSecret("new")


class TestRotationService:
    @pytest.mark.unit()
    def test_generate_only(self) -> None:
        service = RotationService(generate=_generate)

        assert service.supports("generate")
        for name in ("apply", "validate", "promote_hook", "decode"):
            assert not service.supports(name)

    @pytest.mark.unit()
    def test_all_capabilities(self) -> None:
        service = RotationService(
            generate=_generate,
            apply=lambda current, pending: None,
            validate=lambda pending: None,
            promote_hook=lambda pending: None,
            decode=lambda secret: secret,
        )

        assert all(service.supports(name) for name in CAPABILITIES)

    @pytest.mark.unit()
    def test_generate_is_mandatory(self) -> None:
        with pytest.raises(TypeError, match="generate"):
            RotationService(generate=None)  # type: ignore[arg-type]

    @pytest.mark.unit()
    def test_non_callable_slot_rejected(self) -> None:
        with pytest.raises(TypeError, match="validate"):
            RotationService(generate=_generate, validate="yes")  # type: ignore[arg-type]

    @pytest.mark.unit()
    def test_unknown_capability_name(self) -> None:
        with pytest.raises(ValueError, match="rollback"):
            RotationService(generate=_generate).supports("rollback")

    @pytest.mark.unit()
    def test_optional_slots_annotated_as_union_with_none(self) -> None:
        annotations = RotationService.__annotations__

        assert annotations["generate"] == "GenerateFn"
        for name, alias in [
            ("apply", "ApplyFn"),
            ("validate", "ValidateFn"),
            ("promote_hook", "PromoteHookFn"),
            ("decode", "DecodeFn"),
        ]:
            assert annotations[name] == f"{alias} | None"

        hints = get_type_hints(RotationService)
        assert hints["apply"] == ApplyFn | None
        assert hints["decode"] == DecodeFn | None
