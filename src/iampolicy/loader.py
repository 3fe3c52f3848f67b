"""
File and YAML helpers for policy documents.

JSON is the native encoding (see iampolicy.document). These helpers add
reading policies from files and from YAML, and dumping them back to YAML.
Files ending in .yaml or .yml are parsed as YAML; anything else as JSON.
"""

import datetime
import logging
from pathlib import Path
from typing import Any

import yaml

from iampolicy.document import Policy, load_policy
from iampolicy.errors import PolicyDecodeError, PolicyFileError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


def is_yaml_path(path: Path | str) -> bool:
    """Return True if the path should be read as YAML."""
    return Path(path).suffix.lower() in YAML_SUFFIXES


def load_policy_from_yaml(content: str) -> Policy:
    """
    Load a policy from a YAML string.

    Raises:
        PolicyDecodeError: If the YAML is invalid or doesn't match the grammar
        InvalidPolicyVersionError: If Version is not an accepted literal
        InvalidEffectError: If a statement Effect is not Allow or Deny
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PolicyDecodeError(underlying_error=f"Invalid YAML: {e}") from e

    if data is None:
        raise PolicyDecodeError(underlying_error="Empty policy document")

    return Policy.from_dict(_unquote_version(data))


def _unquote_version(data: Any) -> Any:
    # An unquoted YAML Version such as 2012-10-17 parses as a date
    if isinstance(data, dict) and isinstance(data.get("Version"), datetime.date):
        data = {**data, "Version": data["Version"].isoformat()}
    return data


def load_policy_file(path: Path | str) -> Policy:
    """
    Load a policy from a JSON or YAML file.

    Args:
        path: Path to the policy file

    Returns:
        Decoded Policy

    Raises:
        PolicyFileError: If the file doesn't exist or can't be read
        PolicyDecodeError: If the content is not a well-formed policy document
        InvalidPolicyVersionError: If Version is not an accepted literal
        InvalidEffectError: If a statement Effect is not Allow or Deny
    """
    path = Path(path)
    if not path.is_file():
        raise PolicyFileError(path=str(path), underlying_error="No such file")

    try:
        content = path.read_bytes()
    except OSError as e:
        raise PolicyFileError(path=str(path), underlying_error=str(e)) from e

    logger.debug("Loading policy from %s", path)
    if is_yaml_path(path):
        try:
            text = content.decode("utf-8")
        except UnicodeDecodeError as e:
            raise PolicyDecodeError(underlying_error=str(e)) from e
        return load_policy_from_yaml(text)
    return load_policy(content)


def dump_policy_yaml(policy: Policy) -> str:
    """Return the policy as block-style YAML, keeping document key order."""
    return yaml.safe_dump(
        policy.to_dict(),
        sort_keys=False,
        default_flow_style=False,
        allow_unicode=True,
    )
