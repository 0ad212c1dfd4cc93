"""
Factory wiring settings, the secret store and a rotation service together.

Example Usage:
    >>> from libs.rotation import RotationService, create_rotator
    >>> rotator = create_rotator(RotationService(generate=generate))
    >>> rotator.network_timeout
    1.0

Environment Variables (see config/settings.py):
    ROTATION_AWS_REGION / AWS_REGION: Secrets Manager region (default: "us-east-1")
    ROTATION_AWS_ENDPOINT_URL: Optional endpoint override
    ROTATION_NETWORK_TIMEOUT_SECONDS: Per store call timeout (default: 1.0)
"""

import logging

from config.settings import RotationSettings, get_settings
from libs.rotation.aws_store import AWSSecretStore
from libs.rotation.rotator import SecretRotator
from libs.rotation.service import RotationService
from libs.rotation.store import SecretStore

logger = logging.getLogger(__name__)


def create_secret_store(settings: RotationSettings | None = None) -> SecretStore:
    """Build the AWS Secrets Manager store described by ``settings``."""
    settings = settings or get_settings()
    return AWSSecretStore(
        region_name=settings.aws_region,
        endpoint_url=settings.aws_endpoint_url,
        network_timeout=settings.network_timeout_seconds,
    )


def create_rotator(
    service: RotationService,
    settings: RotationSettings | None = None,
    store: SecretStore | None = None,
) -> SecretRotator:
    """
    Create a SecretRotator for ``service``.

    Args:
        service: Rotation capability set
        settings: Settings override. If None, uses get_settings().
        store: Store override. If None, an AWSSecretStore is built from settings.

    Returns:
        SecretRotator ready to handle requests
    """
    settings = settings or get_settings()
    store = store if store is not None else create_secret_store(settings)

    logger.info(
        "Secret rotator created",
        extra={
            "store": type(store).__name__,
            "network_timeout_seconds": settings.network_timeout_seconds,
            "capabilities": [
                name
                for name in ("apply", "validate", "promote_hook", "decode")
                if service.supports(name)
            ],
        },
    )
    return SecretRotator(
        store=store,
        service=service,
        network_timeout=settings.network_timeout_seconds,
    )
