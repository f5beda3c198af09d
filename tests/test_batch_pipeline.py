import threading
from pathlib import Path

import pytest

from speech_normalizer.domain.exceptions import BatchConstructionException, WorkerCrashedException
from speech_normalizer.domain.models import ConversionSuccess
from speech_normalizer.pipeline.batch_pipeline import BatchCoordinator, build_jobs
from speech_normalizer.services.directory_worker import DirectoryWorker


def _make_dir(root, name, files):
    directory = root / name
    directory.mkdir()
    for file_name in files:
        (directory / file_name).write_bytes(b"audio")
    return directory


def test_every_directory_is_converted(tmp_path, transcoder, fake_ffmpeg):
    dirs = [_make_dir(tmp_path, f"d{i}", ["x.mp3", "y.wav"]) for i in range(4)]

    report = BatchCoordinator(transcoder).run(dirs)

    for directory in dirs:
        assert sorted(p.name for p in directory.iterdir()) == ["x.wav", "y.wav"]
    assert [r.directory for r in report.directories] == dirs
    assert report.converted == 8
    assert report.deleted == 4
    assert report.failed == 0


def test_nonexistent_and_valid_directory(tmp_path, transcoder, fake_ffmpeg):
    missing = tmp_path / "missing"
    valid = _make_dir(tmp_path, "valid", ["clip.mp3"])

    report = BatchCoordinator(transcoder).run([missing, valid])

    assert (valid / "clip.wav").exists()
    assert not (valid / "clip.mp3").exists()
    assert not missing.exists()
    assert not report.directories[0].found
    assert report.directories[1].converted == 1


def test_duplicates_are_not_deduplicated(tmp_path, fake_transcoder):
    directory = _make_dir(tmp_path, "dup", ["a.wav"])

    report = BatchCoordinator(fake_transcoder).run([directory, directory])

    assert len(report.directories) == 2
    assert len(fake_transcoder.calls) == 2


def test_slow_directory_does_not_block_siblings(tmp_path):
    slow_dir = _make_dir(tmp_path, "slow", ["a.wav"])
    fast_dir = _make_dir(tmp_path, "fast", ["b.wav"])
    fast_done = threading.Event()
    order = []

    class GatedTranscoder:
        def convert(self, input_path, output_path):
            if input_path.parent == slow_dir:
                # Only returns early if the fast directory runs concurrently.
                assert fast_done.wait(timeout=10)
                order.append("slow")
            else:
                order.append("fast")
                fast_done.set()
            return ConversionSuccess(input_path=input_path, output_path=output_path)

    report = BatchCoordinator(GatedTranscoder()).run([slow_dir, fast_dir])

    assert order == ["fast", "slow"]
    assert report.converted == 2


def test_enumeration_error_only_affects_its_directory(tmp_path, fake_transcoder, monkeypatch):
    locked = _make_dir(tmp_path, "locked", ["a.mp3"])
    ok = _make_dir(tmp_path, "ok", ["b.mp3"])
    real_iterdir = Path.iterdir

    def failing_iterdir(self):
        if self == locked:
            raise PermissionError(13, "Permission denied", str(self))
        return real_iterdir(self)

    monkeypatch.setattr(Path, "iterdir", failing_iterdir)
    report = BatchCoordinator(fake_transcoder).run([locked, ok])

    assert not report.directories[0].completed
    assert "Permission denied" in report.directories[0].error
    assert report.directories[1].completed
    assert (ok / "b.wav").exists()
    assert (locked / "a.mp3").exists()
    assert report.incomplete_directories == [report.directories[0]]


def test_worker_crash_surfaces_after_all_workers_join(tmp_path, fake_transcoder):
    broken = _make_dir(tmp_path, "broken", ["a.wav"])
    healthy = _make_dir(tmp_path, "healthy", ["b.mp3"])

    class CrashingWorker(DirectoryWorker):
        def run(self):
            if self.job.directory == broken:
                raise RuntimeError("unexpected bug")
            return super().run()

    coordinator = BatchCoordinator(fake_transcoder, worker_factory=CrashingWorker)
    with pytest.raises(WorkerCrashedException) as excinfo:
        coordinator.run([broken, healthy])

    assert excinfo.value.crashed_directories == [broken]
    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert (healthy / "b.wav").exists()
    assert not (healthy / "b.mp3").exists()


def test_bounded_worker_pool_still_processes_everything(tmp_path, fake_transcoder):
    dirs = [_make_dir(tmp_path, f"d{i}", ["a.mp3"]) for i in range(5)]

    report = BatchCoordinator(fake_transcoder, max_workers=2).run(dirs)

    assert report.converted == 5
    assert all((d / "a.wav").exists() for d in dirs)


def test_empty_input_returns_empty_report(fake_transcoder):
    report = BatchCoordinator(fake_transcoder).run([])
    assert report.directories == []
    assert report.converted == 0


@pytest.mark.parametrize("bad", [0, -1, True])
def test_invalid_max_workers_is_a_construction_error(fake_transcoder, bad):
    with pytest.raises(BatchConstructionException):
        BatchCoordinator(fake_transcoder, max_workers=bad)


def test_build_jobs_keeps_order_and_makes_paths_absolute(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    cwd = Path.cwd()
    jobs = build_jobs(["b", str(tmp_path / "a"), "b"])

    assert [job.directory for job in jobs] == [cwd / "b", tmp_path / "a", cwd / "b"]
    assert all(job.directory.is_absolute() for job in jobs)


def test_build_jobs_rejects_non_paths():
    with pytest.raises(BatchConstructionException):
        build_jobs([42])
