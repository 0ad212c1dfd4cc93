"""
Secret value abstraction shared by the rotator, the store and services.

A secret is either textual (stored as ``SecretString``) or binary (stored as
``SecretBinary``). Both variants expose ``value()`` returning raw bytes, so
services that only need the payload never branch on the variant. The variant
matters only when re-storing a secret.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class TextSecret:
    """Secret held as a string payload."""

    text: str

    @property
    def is_binary(self) -> bool:
        return False

    def value(self) -> bytes:
        """Return the UTF-8 encoded payload."""
        return self.text.encode("utf-8")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<redacted>)"


@dataclass(frozen=True)
class BinarySecret:
    """Secret held as a binary payload."""

    data: bytes

    @property
    def is_binary(self) -> bool:
        return True

    def value(self) -> bytes:
        return self.data

    def __repr__(self) -> str:
        return f"{type(self).__name__}(<redacted>)"


Secret = Union[TextSecret, BinarySecret]


def secret_from_response(response: Mapping[str, Any]) -> Secret:
    """
    Build a Secret from a GetSecretValue response.

    ``SecretString`` wins when present; otherwise the payload is binary.

    Example:
        >>> secret_from_response({"SecretString": "hunter2"})
        TextSecret(<redacted>)
    """
    if response.get("SecretString") is not None:
        return TextSecret(response["SecretString"])
    return BinarySecret(bytes(response.get("SecretBinary") or b""))
