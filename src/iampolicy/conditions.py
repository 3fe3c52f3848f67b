"""
Named condition operators and condition variables.

These are conveniences for building statements. The document model does not
restrict condition keys to these values: any string is carried through
encode and decode unchanged.
"""

from enum import Enum


class ConditionOperator(str, Enum):
    """Comparison types usable as keys of a statement's Condition block."""

    STRING_EQUALS = "StringEquals"
    STRING_NOT_EQUALS = "StringNotEquals"
    STRING_EQUALS_IGNORE_CASE = "StringEqualsIgnoreCase"
    STRING_NOT_EQUALS_IGNORE_CASE = "StringNotEqualsIgnoreCase"
    STRING_LIKE = "StringLike"
    STRING_NOT_LIKE = "StringNotLike"
    NUMERIC_EQUALS = "NumericEquals"
    NUMERIC_NOT_EQUALS = "NumericNotEquals"
    NUMERIC_LESS_THAN = "NumericLessThan"
    NUMERIC_LESS_THAN_EQUALS = "NumericLessThanEquals"
    NUMERIC_GREATER_THAN = "NumericGreaterThan"
    NUMERIC_GREATER_THAN_EQUALS = "NumericGreaterThanEquals"
    DATE_EQUALS = "DateEquals"
    DATE_NOT_EQUALS = "DateNotEquals"
    DATE_LESS_THAN = "DateLessThan"
    DATE_LESS_THAN_EQUALS = "DateLessThanEquals"
    DATE_GREATER_THAN = "DateGreaterThan"
    DATE_GREATER_THAN_EQUALS = "DateGreaterThanEquals"
    BOOL = "Bool"
    IP_ADDRESS = "IpAddress"
    NOT_IP_ADDRESS = "NotIpAddress"
    ARN_EQUALS = "ArnEquals"
    ARN_NOT_EQUALS = "ArnNotEquals"
    ARN_LIKE = "ArnLike"
    ARN_NOT_LIKE = "ArnNotLike"
    NULL = "Null"


class ConditionVariable(str, Enum):
    """Context keys usable as variables inside a condition operator."""

    CURRENT_TIME = "aws:CurrentTime"
    EPOCH_TIME = "aws:EpochTime"
    MULTI_FACTOR_AUTH_AGE = "aws:MultiFactorAuthAge"
    PRINCIPAL_TYPE = "aws:principaltype"
    SECURE_TRANSPORT = "aws:SecureTransport"
    SOURCE_ARN = "aws:SourceArn"
    SOURCE_IP = "aws:SourceIp"
    USER_AGENT = "aws:UserAgent"
    USER_ID = "aws:userid"
    USERNAME = "aws:username"


def condition_key(value: str | Enum) -> str:
    """Return the plain string form of an operator or variable."""
    if isinstance(value, Enum):
        return str(value.value)
    return value
