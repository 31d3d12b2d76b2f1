"""Shared pytest fixtures for filefind tests."""
import os
from pathlib import Path
from typing import Any, Dict

import pytest
import yaml

from filefind.infrastructure import config_manager, logger as logger_module


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    """Create a temporary directory for tests."""
    return tmp_path


@pytest.fixture
def source_dir(temp_dir: Path) -> Path:
    """Create a source directory with a small tree.

    Layout::

        source/
            README.md
            setup.py
            report.pdf.bak
            src/
                main.py
                util/
                    helpers.py
            docs/
                api.md
    """
    source = temp_dir / "source"
    source.mkdir()

    (source / "README.md").write_text("# Test README\n")
    (source / "setup.py").write_text("print('setup')\n")
    (source / "report.pdf.bak").write_text("backup")

    (source / "src").mkdir()
    (source / "src" / "main.py").write_text("print('main')\n")
    (source / "src" / "util").mkdir()
    (source / "src" / "util" / "helpers.py").write_text("def helper(): pass\n")

    (source / "docs").mkdir()
    (source / "docs" / "api.md").write_text("# API Documentation\n")

    return source


@pytest.fixture
def source_paths(source_dir: Path) -> Dict[str, str]:
    """Map short names to the string paths a walk of source_dir produces."""
    root = str(source_dir)
    return {
        "README.md": os.path.join(root, "README.md"),
        "setup.py": os.path.join(root, "setup.py"),
        "report.pdf.bak": os.path.join(root, "report.pdf.bak"),
        "src": os.path.join(root, "src"),
        "main.py": os.path.join(root, "src", "main.py"),
        "util": os.path.join(root, "src", "util"),
        "helpers.py": os.path.join(root, "src", "util", "helpers.py"),
        "docs": os.path.join(root, "docs"),
        "api.md": os.path.join(root, "docs", "api.md"),
    }


@pytest.fixture
def sample_config() -> Dict[str, Any]:
    """Provide a sample filefind configuration."""
    return {
        "filefind": {
            "search": {
                "root": "/tmp",
                "depth": True,
                "maxdepth": 3,
            },
            "output": {
                "format": "{{ path }}",
            },
            "logging": {
                "level": "DEBUG",
                "file": None,
            },
        }
    }


@pytest.fixture
def config_file(temp_dir: Path, sample_config: Dict[str, Any]) -> Path:
    """Create a configuration file."""
    config_path = temp_dir / "filefind.yaml"
    with open(config_path, "w") as f:
        yaml.dump(sample_config, f)
    return config_path


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path: Path):
    """Keep user configuration and FILEFIND_* variables out of tests."""
    for key in list(os.environ):
        if key.startswith("FILEFIND_"):
            monkeypatch.delenv(key, raising=False)

    missing = tmp_path / "no-such-user-config.yaml"
    monkeypatch.setattr(config_manager, "USER_CONFIG_PATH", missing)
    monkeypatch.setattr("filefind.cli.USER_CONFIG_PATH", missing)


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset the global logger between tests."""
    yield
    logger_module.set_global_logger(None)
