"""Unit tests for loading the policy document."""

import json
from pathlib import Path

import pytest

from portal.persistence.policy_file import load_policy_store
from portal.util.error import ConfigurationError

REPO_ROOT = Path(__file__).parents[3]


def test_shipped_policy_document_is_valid():
    store = load_policy_store(REPO_ROOT / "config" / "invite-policies.json")

    assert [entry.trigger_group for entry in store.policies] == [
        "Invite Portal Admins",
        "staff",
        "members",
    ]
    assert store.default.quota.limit == 1


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError, match="Cannot read policy file"):
        load_policy_store(tmp_path / "absent.json")


def test_invalid_json(tmp_path):
    path = tmp_path / "policies.json"
    path.write_text("{not json")

    with pytest.raises(ConfigurationError, match="Invalid policy file"):
        load_policy_store(path)


def test_schema_violation(tmp_path):
    path = tmp_path / "policies.json"
    path.write_text(
        json.dumps(
            {
                "policies": [
                    {
                        "group": "staff",
                        "quota": {"strategy": "recurring", "limit": 5},
                        "invite": {"max_expiry": "7d"},
                    }
                ],
                "default": {
                    "quota": {"strategy": "fixed", "limit": 1},
                    "invite": {"max_expiry": "24h"},
                },
            }
        )
    )

    with pytest.raises(ConfigurationError, match="requires a period"):
        load_policy_store(path)
