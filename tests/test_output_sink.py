"""Tests for OutputSink backups and atomic writes."""

import os
from datetime import datetime
from pathlib import Path

import pytest

from testsmith.files.exceptions import BackupFailed, WriteFailed
from testsmith.files.output_sink import OutputSink, backup_path_for
from testsmith.models import CodeCandidate, ExtractionMethod

NEW_SOURCE = "import { test } from '@playwright/test';\ntest('new', async () => {});\n"
OLD_SOURCE = "import { test } from '@playwright/test';\ntest('old', async () => {});\n"


def test_backup_path_naming():
    path = Path("tests/login.spec.js")
    backup = backup_path_for(path, datetime(2026, 1, 2, 3, 4, 5))
    assert backup == Path("tests/login.spec.bak.20260102030405.js")


def test_backup_path_without_suffix():
    assert backup_path_for(Path("notes"), datetime(2026, 1, 2, 3, 4, 5)).name == "notes.bak.20260102030405"


class TestWrite:
    def test_new_file_created_without_backup(self, tmp_path, fixed_sink):
        target = tmp_path / "new" / "dir" / "login.spec.js"
        result = fixed_sink.write(target, NEW_SOURCE)

        assert result.wrote is True
        assert result.backup is None
        assert target.read_text(encoding="utf-8") == NEW_SOURCE

    def test_accepts_candidate(self, tmp_path, fixed_sink):
        target = tmp_path / "a.spec.ts"
        fixed_sink.write(target, CodeCandidate(source=NEW_SOURCE, method=ExtractionMethod.FENCED))
        assert target.read_text(encoding="utf-8") == NEW_SOURCE

    def test_overwrite_creates_byte_identical_backup_first(self, tmp_path, fixed_sink, monkeypatch):
        target = tmp_path / "login.spec.js"
        target.write_bytes(OLD_SOURCE.encode("utf-8"))
        expected_backup = tmp_path / "login.spec.bak.20260102030405.js"

        seen = {}
        real_replace = os.replace

        def checking_replace(src, dst):
            seen["backup_before_replace"] = expected_backup.read_bytes()
            real_replace(src, dst)

        monkeypatch.setattr("testsmith.files.output_sink.os.replace", checking_replace)
        result = fixed_sink.write(target, NEW_SOURCE)

        assert seen["backup_before_replace"] == OLD_SOURCE.encode("utf-8")
        assert result.backup is not None
        assert Path(result.backup.backup_path) == expected_backup
        assert result.backup.original_path == str(target)
        assert target.read_text(encoding="utf-8") == NEW_SOURCE

    def test_no_backup_when_disabled(self, tmp_path, fixed_sink):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE, encoding="utf-8")

        result = fixed_sink.write(target, NEW_SOURCE, backup=False)

        assert result.backup is None
        assert sorted(p.name for p in tmp_path.iterdir()) == ["login.spec.js"]

    def test_replaces_content_entirely(self, tmp_path, fixed_sink):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE * 20, encoding="utf-8")
        fixed_sink.write(target, "x", backup=False)
        assert target.read_text(encoding="utf-8") == "x"

    def test_no_temp_files_left_behind(self, tmp_path, fixed_sink):
        target = tmp_path / "login.spec.js"
        fixed_sink.write(target, NEW_SOURCE)
        assert [p.name for p in tmp_path.iterdir()] == ["login.spec.js"]

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_preserves_file_mode(self, tmp_path, fixed_sink):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE, encoding="utf-8")
        target.chmod(0o644)
        fixed_sink.write(target, NEW_SOURCE, backup=False)
        assert target.stat().st_mode & 0o777 == 0o644


class TestDryRun:
    def test_touches_nothing(self, tmp_path, fixed_sink):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE, encoding="utf-8")

        result = fixed_sink.write(target, NEW_SOURCE, dry_run=True)

        assert result.wrote is False
        assert result.dry_run is True
        assert result.backup is None
        assert target.read_text(encoding="utf-8") == OLD_SOURCE
        assert [p.name for p in tmp_path.iterdir()] == ["login.spec.js"]

    def test_missing_target_not_created(self, tmp_path, fixed_sink):
        target = tmp_path / "missing" / "login.spec.js"
        fixed_sink.write(target, NEW_SOURCE, dry_run=True)
        assert not target.parent.exists()


class TestFailures:
    def test_backup_failure_leaves_target_untouched(self, tmp_path, fixed_sink, monkeypatch):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE, encoding="utf-8")

        def failing_copy(src, dst):
            raise PermissionError("read-only directory")

        monkeypatch.setattr("testsmith.files.output_sink.shutil.copyfile", failing_copy)

        with pytest.raises(BackupFailed, match="read-only directory"):
            fixed_sink.write(target, NEW_SOURCE)
        assert target.read_text(encoding="utf-8") == OLD_SOURCE

    def test_write_failure_cleans_temp_file(self, tmp_path, fixed_sink, monkeypatch):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE, encoding="utf-8")

        def failing_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("testsmith.files.output_sink.os.replace", failing_replace)

        with pytest.raises(WriteFailed, match="disk full"):
            fixed_sink.write(target, NEW_SOURCE, backup=False)
        assert target.read_text(encoding="utf-8") == OLD_SOURCE
        assert [p.name for p in tmp_path.iterdir()] == ["login.spec.js"]

    def test_unencodable_source_cleans_temp_file(self, tmp_path, fixed_sink):
        target = tmp_path / "login.spec.js"
        target.write_text(OLD_SOURCE, encoding="utf-8")

        with pytest.raises(WriteFailed):
            fixed_sink.write(target, "test('x', () => {}); // \ud800", backup=False)

        assert target.read_text(encoding="utf-8") == OLD_SOURCE
        assert [p.name for p in tmp_path.iterdir()] == ["login.spec.js"]


def test_default_clock_is_used_for_backup_name(tmp_path):
    target = tmp_path / "a.spec.js"
    target.write_text(OLD_SOURCE, encoding="utf-8")
    result = OutputSink().write(target, NEW_SOURCE)
    assert ".bak." in Path(result.backup.backup_path).name
    assert Path(result.backup.backup_path).read_text(encoding="utf-8") == OLD_SOURCE
