"""
Rules loading and validation tests.
"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from src.rules.loader import load_rules
from src.rules.models import CollectionRules

ROOT = Path(__file__).resolve().parent.parent.parent


@pytest.fixture
def rules_data() -> dict:
    with open(ROOT / "rules.yaml") as f:
        return yaml.safe_load(f)


def write(tmp_path: Path, data: dict) -> Path:
    path = tmp_path / "rules.yaml"
    path.write_text(yaml.safe_dump(data))
    return path


class TestRulesLoading:
    def test_load_project_rules(self) -> None:
        rules = load_rules(ROOT / "rules.yaml")

        assert rules.project.slug == "e-info-me"
        assert rules.collections.limit_for("links") == 25
        assert rules.collections.limit_for("achievements") == 8
        assert rules.collections.fields["links"]["title"].max == 50
        assert rules.collections.fields["links"]["description"].max == 65
        assert rules.admin.activity_log_retention == 10
        assert "admin" in rules.auth.username.reserved

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_rules(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "rules.yaml"
        path.write_text("project: [unclosed")

        with pytest.raises(ValueError, match="Invalid YAML"):
            load_rules(path)

    def test_missing_section(self, tmp_path: Path, rules_data: dict) -> None:
        del rules_data["rate_limits"]

        with pytest.raises(ValueError, match="validation failed"):
            load_rules(write(tmp_path, rules_data))

    def test_unknown_collection_limit_rejected(self, tmp_path: Path, rules_data: dict) -> None:
        rules_data["collections"]["limits"]["videos"] = 5

        with pytest.raises(ValueError):
            load_rules(write(tmp_path, rules_data))

    def test_fenced_block_in_markdown(self, tmp_path: Path, rules_data: dict) -> None:
        path = tmp_path / "rules.md"
        path.write_text("# Rules\n\n```yaml\n" + yaml.safe_dump(rules_data) + "```\n\ntrailing")

        assert load_rules(path).project.slug == "e-info-me"


def test_collection_rules_fall_back_to_builtin_limits() -> None:
    rules = CollectionRules(limits={})
    assert rules.limit_for("portfolio") == 10
    assert rules.limit_for("extracurriculars") == 8


def test_empty_file_is_rejected(tmp_path: Path) -> None:
    path = tmp_path / "rules.yaml"
    path.write_text("")

    with pytest.raises(ValueError, match="must hold a mapping"):
        load_rules(path)


def test_shipped_reserved_usernames_are_strings() -> None:
    reserved = load_rules(ROOT / "rules.yaml").auth.username.reserved

    assert "null" in reserved
    assert all(isinstance(name, str) for name in reserved)


def test_shipped_rules_trust_no_proxy_by_default() -> None:
    assert load_rules(ROOT / "rules.yaml").ops.trusted_proxies == 0
