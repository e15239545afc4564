"""
Unit tests for the file lifecycle router.
"""

import os

import pytest

from faxbridge.config import PipelineConfig, ensure_directories
from faxbridge.models.outcome import FailureReason, FileStatus
from faxbridge.services.lifecycle import LifecycleRouter


@pytest.fixture
def config(tmp_path):
    cfg = PipelineConfig(
        incoming_dir=tmp_path / "pdf_files",
        processed_dir=tmp_path / "processed",
        failed_dir=tmp_path / "failed-uploads",
    )
    cfg.incoming_dir.mkdir()
    ensure_directories(cfg)
    return cfg


def _incoming(config, name, content=b"%PDF"):
    path = config.incoming_dir / name
    path.write_bytes(content)
    return path


class TestRoute:
    """Single-file relocation."""

    def test_valid_file_moves_to_processed(self, config):
        path = _incoming(config, "a.pdf")

        outcome = LifecycleRouter(config).route(path, valid=True)

        assert outcome.status == FileStatus.PROCESSED
        assert outcome.filename == "a.pdf"
        assert (config.processed_dir / "a.pdf").exists()
        assert not path.exists()
        assert not (config.failed_dir / "a.pdf").exists()

    def test_invalid_file_moves_to_failed(self, config):
        path = _incoming(config, "b.pdf")

        outcome = LifecycleRouter(config).route(
            path, valid=False, reason=FailureReason.MISSING_FIELDS, missing_fields=["from"],
        )

        assert outcome.status == FileStatus.FAILED
        assert outcome.reason == FailureReason.MISSING_FIELDS
        assert outcome.missing_fields == ["from"]
        assert (config.failed_dir / "b.pdf").exists()
        assert not (config.processed_dir / "b.pdf").exists()

    def test_target_collision_leaves_file_in_place(self, config):
        path = _incoming(config, "c.pdf", b"new")
        (config.processed_dir / "c.pdf").write_bytes(b"old")

        outcome = LifecycleRouter(config).route(path, valid=True)

        assert outcome.status == FileStatus.PENDING
        assert "already exists" in outcome.error
        assert path.read_bytes() == b"new"
        assert (config.processed_dir / "c.pdf").read_bytes() == b"old"

    def test_missing_source_is_pending_not_raised(self, config):
        outcome = LifecycleRouter(config).route(config.incoming_dir / "gone.pdf", valid=False)

        assert outcome.status == FileStatus.PENDING
        assert outcome.error

    def test_failure_error_is_kept_when_move_fails(self, config):
        path = _incoming(config, "d.pdf")
        (config.failed_dir / "d.pdf").write_bytes(b"")

        outcome = LifecycleRouter(config).route(
            path, valid=False, reason=FailureReason.EXTRACTION_ERROR, error="corrupt",
        )

        assert outcome.status == FileStatus.PENDING
        assert outcome.error.startswith("corrupt; ")

    @pytest.mark.skipif(os.name != "posix" or os.geteuid() == 0, reason="needs POSIX permissions")
    def test_permission_error_is_contained(self, config):
        path = _incoming(config, "e.pdf")
        config.processed_dir.chmod(0o500)
        try:
            outcome = LifecycleRouter(config).route(path, valid=True)
        finally:
            config.processed_dir.chmod(0o700)

        assert outcome.status == FileStatus.PENDING
        assert path.exists()


class TestRouteAll:
    """Batch relocation and the leftover sweep."""

    def test_each_file_lands_in_exactly_one_place(self, config):
        good = _incoming(config, "good.pdf")
        bad = _incoming(config, "bad.pdf")

        outcomes = LifecycleRouter(config).route_all([(good, True), (bad, False)])

        assert [o.status for o in outcomes] == [FileStatus.PROCESSED, FileStatus.FAILED]
        assert sorted(os.listdir(config.processed_dir)) == ["good.pdf"]
        assert sorted(os.listdir(config.failed_dir)) == ["bad.pdf"]
        assert os.listdir(config.incoming_dir) == []

    def test_one_failure_does_not_stop_the_rest(self, config):
        first = _incoming(config, "first.pdf")
        (config.processed_dir / "first.pdf").write_bytes(b"")
        second = _incoming(config, "second.pdf")

        outcomes = LifecycleRouter(config).route_all([(first, True), (second, True)])

        assert [o.status for o in outcomes] == [FileStatus.PENDING, FileStatus.PROCESSED]

    def test_sweep_marks_leftovers(self, config):
        late = _incoming(config, "late.pdf")

        outcomes = LifecycleRouter(config).sweep_leftovers([late])

        assert outcomes[0].status == FileStatus.FAILED
        assert outcomes[0].reason == FailureReason.LEFTOVER
        assert (config.failed_dir / "late.pdf").exists()
