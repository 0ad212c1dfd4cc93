"""
Lambda entrypoint for secret rotation.

AWS Secrets Manager invokes the rotation function once per step with an event
of the shape ``{"SecretId", "ClientRequestToken", "Step"}``. The returned
handler configures logging once per container, scopes the invocation's trace
id, decodes the event and runs the step. Exceptions propagate to the Lambda
runtime; Secrets Manager owns retries and re-delivers the same step.

Example (the deployed module):
    >>> from apps.secret_rotator import make_lambda_handler
    >>> from libs.rotation import RotationService, json_decoder
    >>> lambda_handler = make_lambda_handler(
    ...     RotationService(generate=generate, validate=validate, decode=json_decoder(DbCreds))
    ... )
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from config.settings import RotationSettings, get_settings
from libs.common.logging import LogContext, configure_logging, get_logger
from libs.rotation.exceptions import UnknownPhaseError
from libs.rotation.factory import create_rotator
from libs.rotation.request import RotationRequest
from libs.rotation.service import RotationService
from libs.rotation.store import SecretStore

logger = get_logger(__name__)

LambdaHandler = Callable[[Mapping[str, Any], Any], None]


def _remaining_time(context: Any) -> Callable[[], float] | None:
    """Return a callable reporting the invocation's remaining seconds, if known."""
    get_remaining = getattr(context, "get_remaining_time_in_millis", None)
    if get_remaining is None:
        return None
    return lambda: get_remaining() / 1000.0


def make_lambda_handler(
    service: RotationService,
    settings: RotationSettings | None = None,
    store: SecretStore | None = None,
) -> LambdaHandler:
    """
    Build the Lambda handler for ``service``.

    Args:
        service: Rotation capability set
        settings: Settings override. If None, uses get_settings().
        store: Store override (tests, local stacks). If None, AWS is used.

    Returns:
        ``lambda_handler(event, context)`` suitable as the function handler
    """
    settings = settings or get_settings()
    configure_logging(service_name=settings.service_name, log_level=settings.log_level)
    rotator = create_rotator(service, settings=settings, store=store)

    def lambda_handler(event: Mapping[str, Any], context: Any) -> None:
        with LogContext(getattr(context, "aws_request_id", None)):
            try:
                request = RotationRequest.from_event(event)
            except (KeyError, UnknownPhaseError):
                logger.exception(
                    "Rejected malformed rotation event",
                    extra={
                        "context": {"secret_id": event.get("SecretId"), "step": event.get("Step")}
                    },
                )
                raise

            try:
                rotator.handle(request, remaining_time=_remaining_time(context))
            except Exception:
                logger.exception(
                    "Rotation step failed",
                    extra={
                        "context": {
                            "secret_id": request.secret_id,
                            "phase": request.phase.value,
                            "request_token": request.request_token,
                        }
                    },
                )
                raise

    return lambda_handler
