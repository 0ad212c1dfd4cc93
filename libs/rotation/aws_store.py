"""
AWS Secrets Manager Store for the Rotation Executor.

This module implements AWSSecretStore, the production SecretStore that drives
AWS Secrets Manager via boto3 during a rotation.

Architecture:
    - Uses boto3 client for AWS Secrets Manager API
    - A bounded client set: one client at the network timeout plus at most
      one per power of two below it, each built with botocore Config
      (connect_timeout/read_timeout) so every call is bounded
    - SDK retries disabled (total_max_attempts=1): the rotation caller
      re-delivers failed steps, so retrying here would double the budget
    - IAM role-based authentication (recommended) or access key authentication

Logging:
    Records carry flat extras (secret id, stage, version ids). The store does
    not know the rotation phase; its lines are correlated with the rotator's
    phase-tagged lines through the trace id that TraceIDFilter stamps on every
    record of an invocation.

API mapping:
    fetch_staged        -> GetSecretValue(SecretId, VersionStage)
    put_pending         -> PutSecretValue(SecretId, ClientRequestToken,
                                          VersionStages=["AWSPENDING"], ...)
    promote_to_current  -> UpdateSecretVersionStage(SecretId, "AWSCURRENT",
                                                    MoveToVersionId, RemoveFromVersionId)

Security Considerations:
    - Secret values NEVER logged (only ids, stages, version ids)
    - IAM permissions required: secretsmanager:GetSecretValue,
      secretsmanager:PutSecretValue, secretsmanager:UpdateSecretVersionStage

Usage Example:
    >>> store = AWSSecretStore(region_name="us-east-1")
    >>> staged = store.fetch_staged("prod/db", Stage.CURRENT, timeout=1.0)
    >>> staged.version_id
    'a1b2c3...'
"""

import logging
import math
import threading
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from libs.rotation.exceptions import (
    StageNotFoundError,
    StoreAccessError,
    StoreWriteError,
)
from libs.rotation.secret import Secret, secret_from_response
from libs.rotation.store import SecretStore, Stage, StagedSecret

logger = logging.getLogger(__name__)

DEFAULT_CLIENT_TIMEOUT_SECONDS = 1.0
MIN_CLIENT_TIMEOUT_SECONDS = 0.0625


def _error_code(exc: ClientError) -> str:
    return exc.response.get("Error", {}).get("Code", "Unknown")


class AWSSecretStore(SecretStore):
    """
    AWS Secrets Manager backend for secret rotation.

    Thread Safety:
        The client cache is guarded by threading.Lock; boto3 clients themselves
        are thread-safe, so concurrent invocations may share one store.

    Example:
        >>> # IAM role authentication (recommended)
        >>> store = AWSSecretStore(region_name="us-east-1")
        >>>
        >>> # Local stack
        >>> store = AWSSecretStore(region_name="us-east-1", endpoint_url="http://localhost:4566")
    """

    def __init__(
        self,
        region_name: str = "us-east-1",
        endpoint_url: str | None = None,
        aws_access_key_id: str | None = None,
        aws_secret_access_key: str | None = None,
        network_timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize AWSSecretStore.

        Clients are created lazily on first use: one bounded by
        ``network_timeout`` and, when the invocation deadline is shorter,
        one per power-of-two timeout below it.

        Args:
            region_name: AWS region (e.g., "us-east-1")
            endpoint_url: Optional endpoint override (e.g., LocalStack)
            aws_access_key_id: AWS access key ID (optional, for local testing)
            aws_secret_access_key: AWS secret access key (optional, for local testing)
            network_timeout: Timeout of the default client, in seconds. Non-positive
                values fall back to DEFAULT_CLIENT_TIMEOUT_SECONDS.
        """
        self._lock = threading.Lock()
        self._clients: dict[float, Any] = {}
        self._region_name = region_name
        self._network_timeout = (
            network_timeout if network_timeout > 0 else DEFAULT_CLIENT_TIMEOUT_SECONDS
        )

        self._client_kwargs: dict[str, str] = {"region_name": region_name}
        if endpoint_url:
            self._client_kwargs["endpoint_url"] = endpoint_url
        if aws_access_key_id is not None and aws_secret_access_key is not None:
            self._client_kwargs["aws_access_key_id"] = aws_access_key_id
            self._client_kwargs["aws_secret_access_key"] = aws_secret_access_key
            auth = "access_key"
        else:
            auth = "iam_role"

        logger.info(
            "AWS secret store configured",
            extra={
                "region": region_name,
                "auth": auth,
                "network_timeout_seconds": self._network_timeout,
                "backend": "aws",
            },
        )

    def _timeout_bucket(self, timeout: float) -> float:
        """
        Map a requested timeout onto the fixed client set.

        Requests at or above the network timeout share the default client.
        Shorter requests round DOWN to a power of two (never below
        MIN_CLIENT_TIMEOUT_SECONDS), so a call never outlives the deadline
        that produced it and at most one client exists per power of two
        between the floor and the network timeout.
        """
        if timeout >= self._network_timeout:
            return self._network_timeout
        if timeout <= MIN_CLIENT_TIMEOUT_SECONDS:
            return MIN_CLIENT_TIMEOUT_SECONDS
        return float(2 ** math.floor(math.log2(timeout)))

    def _client(self, timeout: float) -> Any:
        """Return a boto3 client bounded by ``timeout`` seconds (see _timeout_bucket)."""
        bucket = self._timeout_bucket(timeout)
        with self._lock:
            client = self._clients.get(bucket)
        if client is not None:
            return client

        config = Config(
            connect_timeout=bucket,
            read_timeout=bucket,
            retries={"total_max_attempts": 1},
        )
        client = boto3.client("secretsmanager", config=config, **self._client_kwargs)
        with self._lock:
            # First client stored for a bucket wins
            return self._clients.setdefault(bucket, client)

    def fetch_staged(self, secret_id: str, stage: Stage, *, timeout: float) -> StagedSecret:
        stage_label = str(stage)
        try:
            response = self._client(timeout).get_secret_value(
                SecretId=secret_id,
                VersionStage=stage_label,
            )
        except ClientError as e:
            error_code = _error_code(e)
            if error_code == "ResourceNotFoundException":
                raise StageNotFoundError(
                    secret_id=secret_id,
                    stage=stage_label,
                    reason=f"no version labeled {stage_label} (region: {self._region_name})",
                ) from e
            elif error_code == "AccessDeniedException":
                raise StoreAccessError(
                    secret_id=secret_id,
                    stage=stage_label,
                    reason=(
                        "Access denied reading secret. "
                        "Verify IAM role has secretsmanager:GetSecretValue permission."
                    ),
                ) from e
            elif error_code == "InvalidRequestException":
                raise StoreAccessError(
                    secret_id=secret_id,
                    stage=stage_label,
                    reason="Invalid request: secret marked for deletion",
                ) from e
            else:
                raise StoreAccessError(
                    secret_id=secret_id,
                    stage=stage_label,
                    reason=f"AWS API error: {error_code}",
                ) from e
        except BotoCoreError as e:
            raise StoreAccessError(
                secret_id=secret_id,
                stage=stage_label,
                reason=f"AWS SDK error retrieving secret: {e}",
            ) from e

        version_id = response.get("VersionId")
        if not version_id:
            raise StoreAccessError(
                secret_id=secret_id,
                stage=stage_label,
                reason="GetSecretValue response carried no VersionId",
            )

        logger.debug(
            "Fetched staged secret version",
            extra={"secret_id": secret_id, "stage": stage_label, "version_id": version_id},
        )
        return StagedSecret(version_id=version_id, secret=secret_from_response(response))

    def put_pending(
        self,
        secret_id: str,
        version_id: str,
        secret: Secret,
        *,
        timeout: float,
    ) -> None:
        params: dict[str, object] = {
            "SecretId": secret_id,
            "ClientRequestToken": version_id,
            "VersionStages": [str(Stage.PENDING)],
        }
        if secret.is_binary:
            params["SecretBinary"] = secret.value()
        else:
            params["SecretString"] = secret.value().decode("utf-8")

        try:
            self._client(timeout).put_secret_value(**params)
        except ClientError as e:
            error_code = _error_code(e)
            if error_code == "AccessDeniedException":
                reason = (
                    "Access denied writing secret. "
                    "Verify IAM role has secretsmanager:PutSecretValue permission."
                )
            elif error_code == "ResourceExistsException":
                reason = f"Version {version_id} already exists with a different value"
            elif error_code == "ResourceNotFoundException":
                reason = "Secret does not exist"
            else:
                reason = f"AWS error writing secret: {error_code}"
            raise StoreWriteError(
                secret_id=secret_id,
                stage=str(Stage.PENDING),
                reason=reason,
            ) from e
        except BotoCoreError as e:
            raise StoreWriteError(
                secret_id=secret_id,
                stage=str(Stage.PENDING),
                reason=f"AWS SDK error writing secret: {e}",
            ) from e

        logger.info(
            "Pending secret version stored",
            extra={
                "secret_id": secret_id,
                "version_id": version_id,
                "binary": secret.is_binary,
                "backend": "aws",
            },
        )

    def promote_to_current(
        self,
        secret_id: str,
        new_version_id: str,
        old_version_id: str,
        *,
        timeout: float,
    ) -> None:
        try:
            self._client(timeout).update_secret_version_stage(
                SecretId=secret_id,
                VersionStage=str(Stage.CURRENT),
                MoveToVersionId=new_version_id,
                RemoveFromVersionId=old_version_id,
            )
        except ClientError as e:
            error_code = _error_code(e)
            if error_code == "AccessDeniedException":
                reason = (
                    "Access denied promoting secret version. "
                    "Verify IAM role has secretsmanager:UpdateSecretVersionStage permission."
                )
            else:
                reason = f"AWS error promoting secret version: {error_code}"
            raise StoreAccessError(
                secret_id=secret_id,
                stage=str(Stage.CURRENT),
                reason=reason,
            ) from e
        except BotoCoreError as e:
            raise StoreAccessError(
                secret_id=secret_id,
                stage=str(Stage.CURRENT),
                reason=f"AWS SDK error promoting secret version: {e}",
            ) from e

        logger.info(
            "Secret version promoted to AWSCURRENT",
            extra={
                "secret_id": secret_id,
                "new_version_id": new_version_id,
                "old_version_id": old_version_id,
                "backend": "aws",
            },
        )
