import logging
import pytest
from pathlib import Path


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path_factory, monkeypatch):
    """Keeps a real ~/.config/fpr/config.toml from leaking into tests."""
    missing = tmp_path_factory.mktemp("user_config") / "config.toml"
    monkeypatch.setattr("fpr.config.loader.USER_CONFIG_FILE", missing)
    return missing


def create_project_structure(base_path: Path, structure: dict):
    """Creates files (str content) and directories (nested dicts) under base_path."""
    for name, content in structure.items():
        item_path = base_path / name
        if isinstance(content, dict):
            item_path.mkdir(parents=True, exist_ok=True)
            create_project_structure(item_path, content)
        else:
            item_path.parent.mkdir(parents=True, exist_ok=True)
            item_path.write_text(content, encoding="utf-8")


@pytest.fixture(autouse=True)
def reset_fpr_logging():
    """Drops handlers bound to CliRunner streams that are closed after each invoke."""
    yield
    logging.getLogger("fpr").handlers.clear()
