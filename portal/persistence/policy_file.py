"""Loads the invite policy document from disk."""

from pathlib import Path

import logfire
from pydantic import ValidationError

from portal.domain.model import PolicyStore
from portal.util.error import ConfigurationError


def load_policy_store(path: Path) -> PolicyStore:
    """Read and validate the policy document.

    Args:
        path: JSON policy document

    Returns:
        Validated policy store

    Raises:
        ConfigurationError: If the file is missing or does not validate
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read policy file {path}: {e}") from e

    try:
        store = PolicyStore.model_validate_json(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid policy file {path}: {e}") from e

    logfire.info(
        "Policy document loaded",
        path=str(path),
        policies=[entry.trigger_group for entry in store.policies],
    )
    return store
