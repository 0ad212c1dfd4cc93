"""
Apps package - deployable entry points.

This package contains:
- secret_rotator: AWS Lambda handler driving the secret rotation executor
"""
