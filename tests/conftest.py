"""
Pytest configuration and fixtures for iampolicy tests.

This module provides shared fixtures used across unit and integration tests.
"""

import tempfile
from pathlib import Path
from typing import Generator

import pytest

from iampolicy import ConditionOperator, ConditionVariable, Effect, Policy, new_policy


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def example_policy() -> Policy:
    """Return the documented example policy with one fully populated statement."""
    policy = new_policy()
    policy.set_id("policy-id")
    stmt = policy.add_statement()
    stmt.set_sid("statement-id")
    stmt.effect = Effect.ALLOW
    stmt.add_principal("*")
    stmt.add_action("Describe*")
    stmt.resource = "*"
    stmt.add_condition(ConditionOperator.ARN_EQUALS, ConditionVariable.SOURCE_IP, "10.0.0.0/8")
    return policy


@pytest.fixture
def sample_policy_json() -> str:
    """Return a bucket policy JSON document for testing."""
    return """
{
    "Version": "2012-10-17",
    "Id": "bucket-policy",
    "Statement": [
        {
            "Sid": "AllowRead",
            "Effect": "Allow",
            "Principal": {"AWS": ["arn:aws:iam::123456789012:root"]},
            "Action": ["s3:GetObject", "s3:ListBucket"],
            "Resource": "arn:aws:s3:::example-bucket/*"
        },
        {
            "Sid": "DenyInsecure",
            "Effect": "Deny",
            "Principal": {"AWS": ["*"]},
            "Action": ["s3:*"],
            "Resource": "arn:aws:s3:::example-bucket/*",
            "Condition": {"Bool": {"aws:SecureTransport": ["false"]}}
        }
    ]
}
"""


@pytest.fixture
def sample_policy_yaml() -> str:
    """Return the same bucket policy as YAML, with an unquoted Version."""
    return """
Version: 2012-10-17
Id: bucket-policy
Statement:
  - Sid: AllowRead
    Effect: Allow
    Principal:
      AWS:
        - "arn:aws:iam::123456789012:root"
    Action:
      - "s3:GetObject"
      - "s3:ListBucket"
    Resource: "arn:aws:s3:::example-bucket/*"
  - Sid: DenyInsecure
    Effect: Deny
    Principal:
      AWS:
        - "*"
    Action:
      - "s3:*"
    Resource: "arn:aws:s3:::example-bucket/*"
    Condition:
      Bool:
        "aws:SecureTransport":
          - "false"
"""
