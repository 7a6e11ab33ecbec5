from pathlib import Path

import pytest

from advisornet.rules.loader import load_rules

RULES_PATH = Path(__file__).resolve().parents[2] / "rules.yaml"


def test_project_rules_load():
    rules = load_rules(RULES_PATH)

    assert rules.project.brand_name == "Codonyx"
    assert rules.auth.password.min_length == 6
    assert rules.invites.default_days_valid == 30
    assert rules.connections.bio_preview_chars == 200
    assert "avatars" in rules.uploads.buckets
    assert "application/pdf" in rules.uploads.buckets["publications"].allowlist_mime_types


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_rules(tmp_path / "nope.yaml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("project: [unclosed")
    with pytest.raises(ValueError, match="Invalid YAML"):
        load_rules(path)


def test_non_mapping(tmp_path):
    path = tmp_path / "rules.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ValueError, match="mapping"):
        load_rules(path)


def test_schema_violation(tmp_path):
    text = RULES_PATH.read_text().replace("token_bytes: 24", "token_bytes: 2")
    path = tmp_path / "rules.yaml"
    path.write_text(text)
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)


def test_password_algorithm_must_be_argon2(tmp_path):
    text = RULES_PATH.read_text().replace("algorithm: argon2", "algorithm: md5_crypt")
    path = tmp_path / "rules.yaml"
    path.write_text(text)
    with pytest.raises(ValueError, match="validation failed"):
        load_rules(path)
