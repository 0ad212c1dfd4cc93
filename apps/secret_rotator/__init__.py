"""AWS Lambda entry point for the secret rotation executor."""

from apps.secret_rotator.entrypoint import make_lambda_handler

__all__ = ["make_lambda_handler"]
