"""Tests for adding a key to a resource family end to end."""

import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from resx.resource_update_results import FileUpdateResult
from resx.translation_prompt import (MissingResourceInfo, StaticTranslationPrompt, TranslationInput,
                                     TranslationPrompt)
from utils.globals import FileUpdateStatus


def missing(key="NewKey", base_name="Strings"):
    return MissingResourceInfo(class_name=base_name, property_name=key, base_name=base_name)


class RaisingPrompt(TranslationPrompt):
    def request_translations(self, request):
        raise RuntimeError("boom")


def test_multi_file_writes_both_files(make_resx, updater, store, host):
    """Test that each language is written to its own file."""
    default_path = make_resx("Strings.resx")
    german_path = make_resx("Strings.de.resx")

    result = updater.execute(missing(), StaticTranslationPrompt("Hello", "Hallo"))

    assert result.success
    assert store.read(default_path) == {"NewKey": "Hello"}
    assert store.read(german_path) == {"NewKey": "Hallo"}
    assert result.updated_files == [default_path, german_path]
    assert host.calls == [("notify", default_path), ("notify", german_path), ("invalidate", "Strings")]


def test_multi_file_without_secondary_value(make_resx, updater, store):
    """Test that only the primary file is written when no secondary value is given."""
    default_path = make_resx("Strings.resx")
    german_path = make_resx("Strings.de.resx")

    result = updater.execute(missing(), StaticTranslationPrompt("Hello", "  "))

    assert result.success
    assert store.read(default_path) == {"NewKey": "Hello"}
    assert store.read(german_path) == {}


def test_values_are_trimmed(make_resx, updater, store):
    """Test that surrounding whitespace is removed from entered values."""
    default_path = make_resx("Strings.resx")
    make_resx("Strings.de.resx")

    updater.execute(missing(), StaticTranslationPrompt("  Hello  ", "Hallo"))

    assert store.read(default_path)["NewKey"] == "Hello"


def test_single_file_stores_secondary_as_comment(make_resx, updater, store):
    """Test that without a second file the secondary value becomes a comment."""
    path = make_resx("Strings.resx")

    result = updater.execute(missing(), StaticTranslationPrompt("Hello", "Hallo"))

    assert result.success
    entry = next(e for e in store.read_entries(path) if e.key == "NewKey")
    assert entry.value == "Hello"
    assert entry.comment == "German: Hallo"


def test_single_german_file_comment_names_english(make_resx, updater, store):
    """Test the comment prefix when the only file is German."""
    path = make_resx("Strings.de.resx")

    updater.execute(missing(), StaticTranslationPrompt("Hallo", "Hello"))

    entry = next(e for e in store.read_entries(path) if e.key == "NewKey")
    assert entry.value == "Hallo"
    assert entry.comment == "English: Hello"


def test_single_file_requires_secondary_value(make_resx, updater):
    """Test that single file mode rejects an empty secondary value without I/O."""
    path = make_resx("Strings.resx")
    original = Path(path).read_bytes()

    result = updater.execute(missing(), StaticTranslationPrompt("Hello", ""))

    assert not result.success
    assert "cannot be empty when using single file mode" in result.user_message()
    assert result.file_results == []
    assert Path(path).read_bytes() == original


def test_empty_primary_value_is_rejected(make_resx, updater):
    """Test that the primary value is mandatory."""
    make_resx("Strings.resx")
    make_resx("Strings.de.resx")

    result = updater.execute(missing(), StaticTranslationPrompt("   ", "Hallo"))

    assert not result.success
    assert result.user_message() == "English translation cannot be empty."


def test_new_family_is_created(updater, store, project_dir, host):
    """Test that a family without files gets a new default file."""
    result = updater.execute(missing(), StaticTranslationPrompt("Hello", "Hallo"))

    path = str(project_dir / "Strings.resx")
    assert result.success
    assert result.updated_files == [path]
    entry = store.read_entries(path)[0]
    assert (entry.key, entry.value, entry.comment) == ("NewKey", "Hello", "German: Hallo")
    assert host.calls[-1] == ("invalidate", "Strings")


def test_partial_failure_keeps_first_write(make_resx, updater, store, host):
    """Test that a failing second write fails the update without rolling back the first."""
    default_path = make_resx("Strings.resx")
    german_path = make_resx("Strings.de.resx")
    add_entry = store.add_entry_with_status

    def fail_for_german(path, key, value, comment=None):
        if path == german_path:
            return FileUpdateResult(path, FileUpdateStatus.IO_ERROR)
        return add_entry(path, key, value, comment)

    with patch.object(store, "add_entry_with_status", side_effect=fail_for_german):
        result = updater.execute(missing(), StaticTranslationPrompt("Hello", "Hallo"))

    assert not result.success
    assert result.is_partial_failure
    assert result.updated_files == [default_path]
    assert result.failed_files == [german_path]
    assert store.read(default_path) == {"NewKey": "Hello"}
    assert store.read(german_path) == {}
    assert host.calls == []
    assert "inconsistent" in result.format_status_report()


def test_existing_key_reports_duplicate(make_resx, updater, store):
    """Test that an existing key is never overwritten."""
    path = make_resx("Strings.resx", {"NewKey": "Original"})

    result = updater.execute(missing(), StaticTranslationPrompt("Hello", "Hallo"))

    assert not result.success
    assert result.file_results[0].status == FileUpdateStatus.DUPLICATE_KEY
    assert result.user_message() == "Resource 'NewKey' already exists in Strings."
    assert store.read(path) == {"NewKey": "Original"}


def test_cancel_before_writes(make_resx, updater, store):
    """Test that a set cancel event abandons all pending writes."""
    default_path = make_resx("Strings.resx")
    german_path = make_resx("Strings.de.resx")
    request = updater.create_translation_request(missing())
    cancel_event = threading.Event()
    cancel_event.set()

    result = updater.apply_translations(request, TranslationInput("NewKey", "Hello", "Hallo"), cancel_event)

    assert result.cancelled
    assert not result.success
    assert [r.status for r in result.file_results] == [FileUpdateStatus.CANCELLED] * 2
    assert store.read(default_path) == {}
    assert store.read(german_path) == {}
    assert "cancelled" in result.user_message()


def test_dismissed_prompt_is_cancelled(make_resx, updater, host):
    """Test that closing the prompt cancels the update."""
    make_resx("Strings.resx")

    result = updater.execute(missing(), StaticTranslationPrompt(None))

    assert result.cancelled
    assert not result.success
    assert host.calls == []


def test_submit_runs_on_worker_pool(make_resx, updater, store):
    """Test that writes dispatched to the pool complete through the future."""
    path = make_resx("Strings.resx")
    request = updater.create_translation_request(missing())

    future = updater.submit(request, TranslationInput("NewKey", "Hello", "Hallo"))
    result = future.result(timeout=10)

    assert result.success
    assert store.read(path)["NewKey"] == "Hello"


def test_host_errors_are_not_propagated(make_resx, updater, host):
    """Test that a failing host does not fail the update."""
    make_resx("Strings.resx")

    with patch.object(host, "notify_file_changed", side_effect=RuntimeError("generator crashed")):
        result = updater.execute(missing(), StaticTranslationPrompt("Hello", "Hallo"))

    assert result.success
    assert host.calls == [("invalidate", "Strings")]


def test_unexpected_error_becomes_failed_result(make_resx, updater):
    """Test that unexpected exceptions are converted into a failed result."""
    make_resx("Strings.resx")

    result = updater.execute(missing(), RaisingPrompt())

    assert not result.success
    assert result.user_message() == "Failed to add resource: boom"


@pytest.mark.parametrize("resource_info, expected", [
    (None, False),
    (MissingResourceInfo("Strings", "NewKey", "Strings"), True),
    (MissingResourceInfo("Strings", "New Key", "Strings"), False),
    (MissingResourceInfo("Strings", "", "Strings"), False),
    (MissingResourceInfo("Strings", "NewKey", "  "), False),
    (MissingResourceInfo("Strings", "NewKey", "Strings", is_valid_missing_resource=False), False),
])
def test_can_execute(updater, resource_info, expected):
    """Test the preconditions for adding a resource."""
    assert updater.can_execute(resource_info) is expected


def test_execute_rejects_invalid_resource(updater):
    """Test that an invalid resource reference fails with its error message."""
    info = MissingResourceInfo("Strings", "NewKey", "Strings", is_valid_missing_resource=False,
                               error_message="Not a resource class")

    result = updater.execute(info, StaticTranslationPrompt("Hello", "Hallo"))

    assert not result.success
    assert result.user_message() == "Not a resource class"


def test_translation_request_labels(make_resx, updater):
    """Test the prompt labels in single and multi file mode."""
    make_resx("Strings.resx")

    single = updater.create_translation_request(missing())
    assert single.primary_label == "English Translation"
    assert single.secondary_label == "German Translation (will be saved as comment)"
    assert not single.has_secondary_language

    make_resx("Strings.de.resx")

    multi = updater.create_translation_request(missing())
    assert multi.secondary_label == "German Translation"
    assert multi.has_secondary_language


def test_control_characters_fail_validation(make_resx, updater, store):
    """Test that pasted control characters are rejected before any write."""
    default_path = make_resx("Strings.resx", {"Existing": "Value"})
    make_resx("Strings.de.resx")
    original = Path(default_path).read_bytes()

    result = updater.execute(missing(), StaticTranslationPrompt("Tab\x0bBad", "Hallo"))

    assert not result.success
    assert result.file_results == []
    assert result.user_message() == \
        "English translation contains characters that cannot be stored in a resource file."
    assert Path(default_path).read_bytes() == original
