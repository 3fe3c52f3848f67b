"""
Policy document model.

This module defines the Pydantic models for an IAM-style policy document and
its JSON encode/decode contract:
- Policy: version, optional id, ordered statements
- Statement: effect, principals, actions, resource, conditions
- Principal: the "AWS" principal list
- Effect / PolicyVersion: closed value types with fixed wire spellings

Encoding rules:
    - Optional fields (Id, Sid, NotPrincipal, NotAction, Condition) are None
      until set and are left out of the encoding entirely while None
    - Principal and Action are always encoded, as empty collections if needed
    - Version always encodes as "2012-10-17"; "2008-10-17" is accepted on
      decode and read as the current version
    - Condition map keys are emitted sorted

Example usage:
    policy = new_policy()
    stmt = policy.add_statement()
    stmt.effect = Effect.ALLOW
    stmt.add_action("s3:GetObject")
    payload = policy.get()
"""

import json
import logging
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_serializer,
    field_validator,
    model_validator,
)
from pydantic_core import PydanticSerializationError

from iampolicy.conditions import ConditionOperator, ConditionVariable, condition_key
from iampolicy.errors import (
    InvalidEffectError,
    InvalidPolicyVersionError,
    PolicyDecodeError,
    PolicyEncodeError,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Wire Constants
# =============================================================================

POLICY_VERSION = "2012-10-17"
LEGACY_POLICY_VERSION = "2008-10-17"
ACCEPTED_POLICY_VERSIONS = (POLICY_VERSION, LEGACY_POLICY_VERSION)

# Indent used by str(policy)
PRETTY_INDENT = 4


# =============================================================================
# Value Types
# =============================================================================


class PolicyVersion(str, Enum):
    """
    The version of a policy document.

    There is exactly one version. Documents written with the legacy
    "2008-10-17" literal are read as CURRENT and cannot be told apart
    afterwards.
    """

    CURRENT = POLICY_VERSION

    @classmethod
    def parse(cls, value: Any) -> "PolicyVersion":
        """Map a raw "Version" value to CURRENT or raise InvalidPolicyVersionError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value in ACCEPTED_POLICY_VERSIONS:
            if value == LEGACY_POLICY_VERSION:
                logger.debug("Reading legacy policy version %s as %s", value, POLICY_VERSION)
            return cls.CURRENT
        raise InvalidPolicyVersionError(version=value)


class Effect(str, Enum):
    """
    Whether a statement results in an allow or an explicit deny.

    Effect is boolean-like: ALLOW is truthy, DENY is falsy.
    """

    ALLOW = "Allow"
    DENY = "Deny"

    def __bool__(self) -> bool:
        return self is Effect.ALLOW

    @classmethod
    def from_bool(cls, allowed: bool) -> "Effect":
        """Return ALLOW for a true value, DENY otherwise."""
        return cls.ALLOW if allowed else cls.DENY

    @classmethod
    def parse(cls, value: Any) -> "Effect":
        """Map a raw "Effect" value to a member or raise InvalidEffectError."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            for member in cls:
                if value == member.value:
                    return member
        raise InvalidEffectError(effect=value)


def _as_list(value: Any) -> Any:
    # The grammar allows a lone string wherever a string list is expected
    if isinstance(value, str):
        return [value]
    return value


def _log_unknown_keys(model: type[BaseModel], data: Any) -> Any:
    """Log keys the model does not represent; validation then drops them."""
    if not isinstance(data, dict):
        return data
    known = set()
    for name, info in model.model_fields.items():
        known.add(name)
        if info.alias:
            known.add(info.alias)
    unknown = [str(key) for key in data if key not in known]
    if unknown:
        logger.debug("Ignoring unknown %s keys: %s", model.__name__, ", ".join(unknown))
    return data


def _replace_lone_surrogates(value: Any) -> Any:
    """Replace unpaired UTF-16 surrogates (from "\\ud800"-style escapes) with U+FFFD."""
    if isinstance(value, str):
        try:
            value.encode("utf-8")
        except UnicodeEncodeError:
            return value.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "replace")
        return value
    if isinstance(value, dict):
        return {
            _replace_lone_surrogates(key): _replace_lone_surrogates(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [_replace_lone_surrogates(item) for item in value]
    return value


# Written as \u escapes so encoded policies are safe to embed in HTML or script
_JSON_SAFE_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape_unsafe(text: str) -> str:
    # None of these characters can appear in JSON outside a string literal
    for char, escaped in _JSON_SAFE_ESCAPES.items():
        text = text.replace(char, escaped)
    return text


# =============================================================================
# Document Models
# =============================================================================


class Principal(BaseModel):
    """
    The accounts, users or roles a statement applies to.

    Attributes:
        aws: Principal identifiers, order kept and duplicates allowed
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore", populate_by_name=True)

    aws: list[str] = Field(
        default_factory=list,
        alias="AWS",
        description="Principal identifiers",
    )

    @model_validator(mode="before")
    @classmethod
    def log_unknown_keys(cls, data: Any) -> Any:
        """Principal types other than AWS (Service, Federated, ...) are dropped."""
        return _log_unknown_keys(cls, data)

    @field_validator("aws", mode="before")
    @classmethod
    def normalize_aws(cls, v: Any) -> Any:
        """Accept a single identifier as a one-element list."""
        return _as_list(v)


class Statement(BaseModel):
    """
    A single rule within a policy.

    Statements are created through Policy.add_statement() and mutated through
    the methods below; effect and resource are assigned directly.

    Attributes:
        sid: Optional statement identifier
        effect: ALLOW or DENY, DENY unless set
        principal: Who the statement applies to (always encoded)
        not_principal: Who the statement excludes (encoded only once populated)
        action: Action patterns (always encoded)
        not_action: Excluded action patterns (encoded only once populated)
        resource: Resource the statement covers
        condition: operator -> variable -> values
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore", populate_by_name=True)

    sid: str | None = Field(
        default=None,
        alias="Sid",
        description="Optional statement identifier",
    )
    effect: Effect = Field(
        default=Effect.DENY,
        alias="Effect",
        description="Allow or Deny",
    )
    principal: Principal = Field(
        default_factory=Principal,
        alias="Principal",
        description="Principals the statement applies to",
    )
    not_principal: Principal | None = Field(
        default=None,
        alias="NotPrincipal",
        description="Principals the statement excludes",
    )
    action: list[str] = Field(
        default_factory=list,
        alias="Action",
        description="Action patterns",
    )
    not_action: list[str] | None = Field(
        default=None,
        alias="NotAction",
        description="Excluded action patterns",
    )
    resource: str = Field(
        default="",
        alias="Resource",
        description="Resource the statement covers",
    )
    condition: dict[str, dict[str, list[str]]] | None = Field(
        default=None,
        alias="Condition",
        description="Condition operator -> variable -> values",
    )

    @model_validator(mode="before")
    @classmethod
    def log_unknown_keys(cls, data: Any) -> Any:
        return _log_unknown_keys(cls, data)

    @field_validator("effect", mode="before")
    @classmethod
    def validate_effect(cls, v: Any) -> Effect:
        """Only the exact literals "Allow" and "Deny" are valid effects."""
        return Effect.parse(v)

    @field_validator("action", "not_action", mode="before")
    @classmethod
    def normalize_actions(cls, v: Any) -> Any:
        """Accept a single action as a one-element list."""
        return _as_list(v)

    @field_validator("condition", mode="before")
    @classmethod
    def normalize_condition(cls, v: Any) -> Any:
        """Accept a single value per condition variable as a one-element list."""
        if not isinstance(v, dict):
            return v
        return {
            operator: (
                {variable: _as_list(values) for variable, values in variables.items()}
                if isinstance(variables, dict)
                else variables
            )
            for operator, variables in v.items()
        }

    @field_serializer("condition")
    def serialize_condition(
        self, condition: dict[str, dict[str, list[str]]] | None
    ) -> dict[str, dict[str, list[str]]] | None:
        """Emit condition maps with sorted keys."""
        if condition is None:
            return None
        return {
            operator: {variable: list(values) for variable, values in sorted(variables.items())}
            for operator, variables in sorted(condition.items())
        }

    def set_sid(self, sid: str) -> None:
        """Set the statement's Sid."""
        self.sid = sid

    def add_principal(self, principal: str) -> None:
        """Add an extra principal to the Principal list."""
        self.principal.aws.append(principal)

    def add_not_principal(self, principal: str) -> None:
        """Add an extra principal to the NotPrincipal list."""
        if self.not_principal is None:
            self.not_principal = Principal()
        self.not_principal.aws.append(principal)

    def add_action(self, action: str) -> None:
        """Add an action pattern."""
        self.action.append(action)

    def add_not_action(self, action: str) -> None:
        """Add an excluded action pattern."""
        if self.not_action is None:
            self.not_action = []
        self.not_action.append(action)

    def add_condition(
        self,
        operator: ConditionOperator | str,
        variable: ConditionVariable | str,
        value: str,
    ) -> None:
        """
        Append a value to condition[operator][variable].

        Missing operator or variable entries are created. Values accumulate
        in call order and are never deduplicated.
        """
        if self.condition is None:
            self.condition = {}
        variables = self.condition.setdefault(condition_key(operator), {})
        variables.setdefault(condition_key(variable), []).append(value)


class Policy(BaseModel):
    """
    A complete policy document.

    Attributes:
        version: Always PolicyVersion.CURRENT
        id: Optional document identifier
        statements: Statements in insertion order
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore", populate_by_name=True)

    version: PolicyVersion = Field(
        default=PolicyVersion.CURRENT,
        alias="Version",
        description="Policy language version",
    )
    id: str | None = Field(
        default=None,
        alias="Id",
        description="Optional document identifier",
    )
    statements: list[Statement] = Field(
        default_factory=list,
        alias="Statement",
        description="Statements in insertion order",
    )

    @model_validator(mode="before")
    @classmethod
    def log_unknown_keys(cls, data: Any) -> Any:
        return _log_unknown_keys(cls, data)

    @field_validator("version", mode="before")
    @classmethod
    def validate_version(cls, v: Any) -> PolicyVersion:
        """Accept the current and legacy version literals only."""
        return PolicyVersion.parse(v)

    def set_id(self, policy_id: str) -> None:
        """Set the Id of the policy."""
        self.id = policy_id

    def add_statement(self) -> Statement:
        """Append a new empty statement and return it for mutation."""
        statement = Statement()
        self.statements.append(statement)
        return statement

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-compatible form of the document."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    def _encode(self, indent: int | None = None) -> bytes:
        separators = (",", ":") if indent is None else (",", ": ")
        try:
            text = json.dumps(
                self.to_dict(),
                indent=indent,
                separators=separators,
                ensure_ascii=False,
            )
            # UnicodeEncodeError (lone surrogates) is a ValueError
            return _escape_unsafe(text).encode("utf-8")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise PolicyEncodeError(underlying_error=str(e)) from e

    def get(self) -> bytes:
        """
        Return the policy as compact JSON, ready for use in API calls.

        "<", ">", "&", U+2028 and U+2029 are written as \\u escapes.

        Raises:
            PolicyEncodeError: If the in-memory document cannot be encoded
        """
        return self._encode()

    def __str__(self) -> str:
        """Return the policy as indented JSON, or "" if it cannot be encoded."""
        try:
            return self._encode(indent=PRETTY_INDENT).decode("utf-8")
        except PolicyEncodeError as e:
            logger.warning("Could not format policy document: %s", e)
            return ""

    # -------------------------------------------------------------------------
    # Decoding
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Any) -> "Policy":
        """
        Build a policy from already-parsed JSON or YAML data.

        Raises:
            InvalidPolicyVersionError: If Version is not an accepted literal
            InvalidEffectError: If a statement Effect is not Allow or Deny
            PolicyDecodeError: If the data does not match the document grammar
        """
        if not isinstance(data, dict):
            msg = f"expected an object, got {type(data).__name__}"
            raise PolicyDecodeError(underlying_error=msg)
        try:
            return cls.model_validate(_replace_lone_surrogates(data))
        except ValidationError as e:
            raise PolicyDecodeError(underlying_error=str(e)) from e


def new_policy() -> Policy:
    """Create a new empty policy."""
    return Policy()


def load_policy(data: bytes | str) -> Policy:
    """
    Create a policy from JSON.

    Args:
        data: JSON text, as bytes or str

    Returns:
        Decoded Policy

    Raises:
        InvalidPolicyVersionError: If Version is not an accepted literal
        InvalidEffectError: If a statement Effect is not Allow or Deny
        PolicyDecodeError: If the input is not a well-formed policy document
    """
    try:
        raw = json.loads(data)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise PolicyDecodeError(underlying_error=str(e)) from e

    policy = Policy.from_dict(raw)
    logger.debug("Decoded policy with %d statement(s)", len(policy.statements))
    return policy
