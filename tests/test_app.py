"""Tests for the headless command line."""

import json
import logging

import pytest

import app
from resx.resx_file_store import ResXFileStore
from utils.logging_setup import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_app_logger():
    """Drop the handler main() attaches so it does not outlive captured streams."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def config_dir(tmp_path):
    directory = tmp_path / "configs"
    directory.mkdir()
    (directory / "user_config.json").write_text(json.dumps({"logging": {"level": "WARNING"}}), encoding="utf-8")
    return str(directory)


def test_headless_add(make_resx, project_dir, config_dir, capsys):
    """Test adding a key from the command line."""
    default_path = make_resx("Strings.resx")
    german_path = make_resx("Strings.de.resx")

    exit_code = app.main([str(project_dir), "-c", "Strings", "-k", "Title",
                          "--primary", "Title", "--secondary", "Titel", "--config-dir", config_dir])

    assert exit_code == 0
    assert "Added resource 'Title' to Strings." in capsys.readouterr().out
    store = ResXFileStore()
    assert store.read(default_path) == {"Title": "Title"}
    assert store.read(german_path) == {"Title": "Titel"}


def test_existing_key_exits_cleanly(make_resx, project_dir, config_dir, capsys):
    """Test that an already defined key is reported without writing."""
    make_resx("Strings.de.resx", {"title": "Titel"})

    exit_code = app.main([str(project_dir), "-c", "Strings", "-k", "Title",
                          "--primary", "Title", "--config-dir", config_dir])

    assert exit_code == 0
    assert "already exists" in capsys.readouterr().out


def test_invalid_key_fails(make_resx, project_dir, config_dir, capsys):
    """Test that an invalid key exits with an error."""
    path = make_resx("Strings.resx")

    exit_code = app.main([str(project_dir), "-c", "Strings", "-k", "1st key",
                          "--primary", "Title", "--secondary", "Titel", "--config-dir", config_dir])

    assert exit_code == 1
    assert "Invalid resource key format" in capsys.readouterr().out
    assert ResXFileStore().read(path) == {}


def test_headless_without_values_is_cancelled(make_resx, project_dir, config_dir):
    """Test that headless mode without a primary value does not write."""
    path = make_resx("Strings.resx")

    exit_code = app.main([str(project_dir), "-c", "Strings", "-k", "Title", "--headless",
                          "--config-dir", config_dir])

    assert exit_code == 1
    assert ResXFileStore().read(path) == {}


def test_designer_class_resolves_family(make_resx, project_dir, config_dir):
    """Test that the generated class name is mapped to its ResX family."""
    path = make_resx("Texts.resx", subdir="Properties")
    (project_dir / "Properties" / "Texts.Designer.cs").write_text(
        "internal class UiTexts {}", encoding="utf-8")

    exit_code = app.main([str(project_dir), "-c", "UiTexts", "-k", "Title",
                          "--primary", "Title", "--secondary", "Titel", "--config-dir", config_dir])

    assert exit_code == 0
    entry = ResXFileStore().read_entries(path)[0]
    assert (entry.key, entry.comment) == ("Title", "German: Titel")
