"""
Tests for error recovery and error policies.
"""

import errno
import logging
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from collectfiles import (
    CollectErrorsPolicy,
    CollectFiles,
    CollectFilesError,
    ContinueOnErrorsPolicy,
    DirectoryReadError,
    FailFastPolicy,
    ThresholdPolicy,
    collect_files,
)
from collectfiles import traversal
from collectfiles.testing import build_tree, relative_paths


@pytest.fixture
def tree(tmp_path):
    root = build_tree(tmp_path / "root", {
        "top.md": "t",
        "open": {"ok.md": "o"},
        "locked": {"secret.md": "s"},
    })
    return root


def lock(*names):
    """Patch directory listing so directories with these names are unreadable."""
    real = traversal._list_entries

    def listing(path):
        if Path(path).name in names:
            raise PermissionError(errno.EACCES, "Permission denied", str(path))
        return real(path)

    return patch.object(traversal, "_list_entries", side_effect=listing)


class TestRecovery:
    """Single-shot error recovery."""

    def test_missing_root_without_recovery(self, tmp_path):
        missing = tmp_path / "missing"
        with pytest.raises(DirectoryReadError) as exc_info:
            collect_files(missing)
        assert exc_info.value.path == missing
        assert isinstance(exc_info.value.error, FileNotFoundError)
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)

    def test_root_is_a_file(self, tmp_path):
        target = tmp_path / "plain.txt"
        target.write_text("x")
        with pytest.raises(DirectoryReadError) as exc_info:
            collect_files(target)
        assert isinstance(exc_info.value.error, NotADirectoryError)

    def test_recovery_substitutes_root(self, tmp_path, tree):
        recover = Mock(return_value=tree)
        result = collect_files(tmp_path / "missing", error_recovery=recover)

        assert set(result) == set(collect_files(tree))
        recover.assert_called_once()
        (error,), _ = recover.call_args
        assert isinstance(error, FileNotFoundError)

    def test_recovery_accepts_string_paths(self, tmp_path, tree):
        result = collect_files(tmp_path / "missing",
                               error_recovery=lambda error: str(tree / "open"))
        assert relative_paths(result, tree) == {"open/ok.md"}

    def test_recovery_is_single_shot(self, tmp_path):
        second = tmp_path / "also-missing"
        recover = Mock(return_value=second)

        with pytest.raises(DirectoryReadError) as exc_info:
            collect_files(tmp_path / "missing", error_recovery=recover)

        assert recover.call_count == 1
        assert exc_info.value.path == second

    def test_recovery_can_abort(self, tmp_path):
        class Unrecoverable(Exception):
            pass

        def recover(error):
            if isinstance(error, FileNotFoundError):
                return tmp_path
            raise Unrecoverable(str(error))

        target = tmp_path / "plain.txt"
        target.write_text("x")
        with pytest.raises(Unrecoverable):
            collect_files(target, error_recovery=recover)

    def test_recovery_branches_on_error_kind(self, tmp_path, tree):
        def recover(error):
            if isinstance(error, FileNotFoundError):
                return tree / "open"
            raise error

        result = collect_files(tmp_path / "missing", error_recovery=recover)
        assert relative_paths(result, tree) == {"open/ok.md"}

    def test_recovery_applies_to_subdirectories(self, tree):
        with lock("locked"):
            result = collect_files(tree, error_recovery=lambda error: tree / "open")
        # locked/ is read as open/, so ok.md shows up twice
        assert sorted(p.relative_to(tree).as_posix() for p in result) == [
            "open/ok.md", "open/ok.md", "top.md",
        ]

    def test_entry_check_failure_recovered(self, tmp_path, tree):
        ghost = Mock(path=str(tree / "ghost"))
        ghost.is_dir.side_effect = PermissionError(errno.EACCES, "Permission denied")

        with patch.object(traversal, "_list_entries", return_value=[ghost]):
            result = collect_files(tree, error_recovery=lambda error: tree / "top.md")

        assert result == [tree / "top.md"]

    def test_entry_check_failure_without_recovery(self, tree):
        ghost = Mock(path=str(tree / "ghost"))
        ghost.is_dir.side_effect = PermissionError(errno.EACCES, "Permission denied")

        with patch.object(traversal, "_list_entries", return_value=[ghost]):
            with pytest.raises(DirectoryReadError):
                collect_files(tree)


class TestErrorPolicies:
    """Policies for directories that stay unreadable."""

    def test_fail_fast_is_default(self, tree):
        with lock("locked"):
            with pytest.raises(DirectoryReadError) as exc_info:
                collect_files(tree)
        assert exc_info.value.path == tree / "locked"
        assert isinstance(exc_info.value.error, PermissionError)

    def test_fail_fast_policy(self):
        policy = FailFastPolicy()
        error = PermissionError("Access denied")
        with pytest.raises(DirectoryReadError) as exc_info:
            policy.handle(error, Path("/test"))
        assert exc_info.value.__cause__ is error

    def test_continue_on_errors_skips_branch(self, tree):
        policy = ContinueOnErrorsPolicy(verbose=False)
        with lock("locked"):
            result = collect_files(tree, error_policy=policy)

        assert relative_paths(result, tree) == {"top.md", "open/ok.md"}
        assert policy.skipped_paths == [tree / "locked"]

    def test_continue_on_errors_logs_warning(self, tree, caplog):
        policy = ContinueOnErrorsPolicy(verbose=True)
        with caplog.at_level(logging.WARNING, logger="collectfiles.error_policies"):
            with lock("locked"):
                collect_files(tree, error_policy=policy)
        assert "Skipping inaccessible directory" in caplog.text

    def test_quiet_policy_does_not_log(self, tree, caplog):
        with caplog.at_level(logging.WARNING, logger="collectfiles.error_policies"):
            with lock("locked"):
                collect_files(tree, error_policy=CollectErrorsPolicy())
        assert caplog.text == ""

    def test_collect_errors_statistics(self):
        policy = CollectErrorsPolicy()
        assert policy.handle(PermissionError("denied"), Path("/a")) == []
        assert policy.handle(FileNotFoundError("gone"), Path("/b")) == []

        stats = policy.get_statistics()
        assert stats['total_errors'] == 2
        assert stats['permission_errors'] == 1
        assert stats['not_found_errors'] == 1
        assert stats['skipped_paths'] == 2

    def test_policy_applies_after_failed_recovery(self, tmp_path, tree):
        policy = CollectErrorsPolicy()
        result = collect_files(tmp_path / "missing",
                               error_recovery=lambda error: tmp_path / "also-missing",
                               error_policy=policy)
        assert result == []
        assert policy.skipped_paths == [tmp_path / "also-missing"]

    def test_threshold_policy(self):
        policy = ThresholdPolicy(max_errors=2, verbose=False)
        assert policy.handle(PermissionError("1"), Path("/1")) == []
        assert policy.handle(PermissionError("2"), Path("/2")) == []

        with pytest.raises(CollectFilesError) as exc_info:
            policy.handle(PermissionError("3"), Path("/3"))
        assert "Error threshold exceeded" in str(exc_info.value)

    def test_threshold_policy_during_traversal(self, tree):
        with lock("locked", "open"):
            with pytest.raises(CollectFilesError):
                collect_files(tree, error_policy=ThresholdPolicy(max_errors=1, verbose=False))

    def test_unreadable_entry_keeps_siblings(self, tmp_path):
        root = build_tree(tmp_path / "r", {"keep.md": "k", "sub": {"deep.md": "d"}})
        ghost = Mock(path=str(root / "ghost"))
        ghost.is_dir.side_effect = PermissionError(errno.EACCES, "Permission denied")
        real = traversal._list_entries

        def listing(path):
            entries = real(path)
            if Path(path) == root:
                entries.append(ghost)
            return entries

        policy = ContinueOnErrorsPolicy(verbose=False)
        with patch.object(traversal, "_list_entries", side_effect=listing):
            result = collect_files(root, error_policy=policy)

        assert relative_paths(result, root) == {"keep.md", "sub/deep.md"}
        assert policy.skipped_paths == [root / "ghost"]

    def test_unreadable_entry_reported_by_frame(self, tree):
        ghost = Mock(path=str(tree / "ghost"))
        error = PermissionError(errno.EACCES, "Permission denied")
        ghost.is_dir.side_effect = error

        with patch.object(traversal, "_list_entries", return_value=[ghost]):
            files, subdirs, entry_errors = traversal.scan_directory(tree)

        assert files == []
        assert subdirs == []
        assert entry_errors == [(tree / "ghost", error)]

    def test_builder_uses_policy(self, tree):
        policy = CollectErrorsPolicy()
        with lock("locked"):
            result = CollectFiles(tree).with_error_policy(policy).collect()
        assert relative_paths(result, tree) == {"top.md", "open/ok.md"}
        assert len(policy.errors) == 1
