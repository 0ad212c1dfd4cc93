"""
JSON secret decoding.

Most rotated secrets are JSON documents (``{"username": ..., "password": ...}``).
``json_decoder`` builds a decode capability that validates the payload into a
pydantic model, so generate/apply/validate receive typed data instead of raw
bytes.

Example:
    >>> class DatabaseCredentials(BaseModel):
    ...     username: str
    ...     password: str
    >>> service = RotationService(
    ...     generate=generate,
    ...     decode=json_decoder(DatabaseCredentials),
    ... )
    >>> # inside generate(current):
    >>> current.data.username
    'app_user'
    >>> JsonSecret.from_model(current.data.model_copy(update={"password": new_pw}))
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel

from libs.rotation.secret import Secret, TextSecret

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass(frozen=True, repr=False)
class JsonSecret(TextSecret, Generic[ModelT]):
    """
    Text secret whose payload has been validated into a pydantic model.

    Stored exactly like any other TextSecret (as SecretString).

    Attributes:
        data: Parsed model instance
    """

    data: ModelT = field(compare=False)

    @classmethod
    def from_model(cls, model: ModelT) -> JsonSecret[ModelT]:
        """Serialise a model into a storable secret."""
        return cls(text=model.model_dump_json(), data=model)


def json_decoder(model: type[ModelT]) -> Callable[[Secret], JsonSecret[ModelT]]:
    """
    Return a decode capability parsing secrets as JSON into ``model``.

    Text and binary payloads are both accepted; the result is always a
    JsonSecret (text variant).

    Raises (from the returned callable):
        pydantic.ValidationError: Payload is not valid JSON or does not match the model
    """

    def decode(secret: Secret) -> JsonSecret[ModelT]:
        raw = secret.value()
        data = model.model_validate_json(raw)
        return JsonSecret(text=raw.decode("utf-8"), data=data)

    decode.__name__ = f"decode_{model.__name__}"
    return decode
