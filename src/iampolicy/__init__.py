"""
iampolicy - Build, parse and validate IAM policy documents.

iampolicy models the cloud-provider policy grammar (Version, Id, Statement
with Effect, Principal, Action, Resource and Condition) and round-trips it
to and from JSON. It provides:
- Programmatic construction with a fail-closed default (Deny)
- Strict decoding of Version and Effect literals
- Compact and indented JSON encodings
- JSON/YAML file helpers and a small CLI

Example usage:
    $ iampolicy validate bucket-policy.json
    $ iampolicy fmt role-policy.yaml --compact
    $ iampolicy show bucket-policy.json
"""

import logging

__version__ = "0.1.0"
__author__ = "iampolicy Contributors"

from iampolicy.conditions import ConditionOperator, ConditionVariable
from iampolicy.document import (
    Effect,
    Policy,
    PolicyVersion,
    Principal,
    Statement,
    load_policy,
    new_policy,
)
from iampolicy.errors import (
    InvalidEffectError,
    InvalidPolicyVersionError,
    PolicyDecodeError,
    PolicyEncodeError,
    PolicyError,
    PolicyFileError,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "__version__",
    "__author__",
    "ConditionOperator",
    "ConditionVariable",
    "Effect",
    "InvalidEffectError",
    "InvalidPolicyVersionError",
    "Policy",
    "PolicyDecodeError",
    "PolicyEncodeError",
    "PolicyError",
    "PolicyFileError",
    "PolicyVersion",
    "Principal",
    "Statement",
    "load_policy",
    "new_policy",
]
