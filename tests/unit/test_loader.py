"""
Unit tests for file and YAML loading.

Tests cover:
- Loading JSON and YAML files
- YAML-specific parsing quirks
- Missing and malformed files
- Dumping policies to YAML
"""

from pathlib import Path

import pytest
import yaml

from iampolicy.document import Effect, Policy, load_policy
from iampolicy.errors import (
    InvalidEffectError,
    InvalidPolicyVersionError,
    PolicyDecodeError,
    PolicyFileError,
)
from iampolicy.loader import (
    dump_policy_yaml,
    is_yaml_path,
    load_policy_file,
    load_policy_from_yaml,
)


class TestIsYamlPath:
    """Tests for suffix detection."""

    @pytest.mark.parametrize("name", ["p.yaml", "p.yml", "P.YAML"])
    def test_yaml_suffixes(self, name: str) -> None:
        """YAML suffixes are detected case-insensitively."""
        assert is_yaml_path(name)

    @pytest.mark.parametrize("name", ["p.json", "policy", "p.yaml.json"])
    def test_other_suffixes(self, name: str) -> None:
        """Everything else is JSON."""
        assert not is_yaml_path(name)


class TestLoadPolicyFromYaml:
    """Tests for load_policy_from_yaml()."""

    def test_matches_json(self, sample_policy_json: str, sample_policy_yaml: str) -> None:
        """The YAML and JSON fixtures describe the same policy."""
        assert load_policy_from_yaml(sample_policy_yaml) == load_policy(sample_policy_json)

    def test_unquoted_legacy_version(self) -> None:
        """An unquoted legacy version date is accepted."""
        policy = load_policy_from_yaml("Version: 2008-10-17\nStatement: []\n")
        assert policy.statements == []

    def test_unquoted_unknown_version(self) -> None:
        """An unquoted unknown version date is still rejected."""
        with pytest.raises(InvalidPolicyVersionError) as exc_info:
            load_policy_from_yaml("Version: 2009-10-17\nStatement: []\n")
        assert exc_info.value.version == "2009-10-17"

    def test_invalid_effect(self) -> None:
        """Effect validation applies to YAML too."""
        with pytest.raises(InvalidEffectError):
            load_policy_from_yaml("Statement:\n  - Effect: allow\n")

    def test_invalid_yaml(self) -> None:
        """Unparseable YAML raises PolicyDecodeError."""
        with pytest.raises(PolicyDecodeError) as exc_info:
            load_policy_from_yaml("Statement: [unclosed\n")
        assert isinstance(exc_info.value.__cause__, yaml.YAMLError)

    def test_empty_document(self) -> None:
        """An empty YAML document is not a policy."""
        with pytest.raises(PolicyDecodeError):
            load_policy_from_yaml("")

    def test_non_mapping(self) -> None:
        """A YAML list is not a policy."""
        with pytest.raises(PolicyDecodeError):
            load_policy_from_yaml("- a\n- b\n")


class TestLoadPolicyFile:
    """Tests for load_policy_file()."""

    def test_load_json_file(self, temp_dir: Path, sample_policy_json: str) -> None:
        """JSON files are decoded with load_policy."""
        path = temp_dir / "policy.json"
        path.write_text(sample_policy_json)
        policy = load_policy_file(path)
        assert policy.id == "bucket-policy"
        assert policy.statements[0].effect is Effect.ALLOW

    def test_load_yaml_file(self, temp_dir: Path, sample_policy_yaml: str) -> None:
        """YAML files are decoded by suffix."""
        path = temp_dir / "policy.yml"
        path.write_text(sample_policy_yaml)
        policy = load_policy_file(str(path))
        assert len(policy.statements) == 2

    def test_missing_file(self, temp_dir: Path) -> None:
        """A missing file raises PolicyFileError."""
        with pytest.raises(PolicyFileError) as exc_info:
            load_policy_file(temp_dir / "missing.json")
        assert exc_info.value.path.endswith("missing.json")

    def test_directory_rejected(self, temp_dir: Path) -> None:
        """A directory is not a policy file."""
        with pytest.raises(PolicyFileError):
            load_policy_file(temp_dir)

    def test_malformed_json_file(self, temp_dir: Path) -> None:
        """Malformed JSON files raise PolicyDecodeError."""
        path = temp_dir / "policy.json"
        path.write_text("{")
        with pytest.raises(PolicyDecodeError):
            load_policy_file(path)

    def test_non_utf8_yaml_file(self, temp_dir: Path) -> None:
        """Undecodable YAML bytes raise PolicyDecodeError."""
        path = temp_dir / "policy.yaml"
        path.write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(PolicyDecodeError):
            load_policy_file(path)


class TestDumpPolicyYaml:
    """Tests for dump_policy_yaml()."""

    def test_key_order(self, example_policy: Policy) -> None:
        """Keys keep document order rather than being sorted."""
        dumped = dump_policy_yaml(example_policy)
        assert dumped.index("Version") < dumped.index("Id") < dumped.index("Statement")

    def test_version_stays_string(self, example_policy: Policy) -> None:
        """The version is quoted so it doesn't read back as a date."""
        dumped = dump_policy_yaml(example_policy)
        assert yaml.safe_load(dumped)["Version"] == "2012-10-17"

    def test_reload(self, example_policy: Policy) -> None:
        """Dumped YAML loads back to the same policy."""
        assert load_policy_from_yaml(dump_policy_yaml(example_policy)) == example_policy
