import subprocess
import threading
from pathlib import Path

import pytest

from speech_normalizer.domain.models import (
    ConversionFailure,
    ConversionSuccess,
    FailureKind,
    TargetAudioParams,
)
from speech_normalizer.services.transcoder import Transcoder


class FakeFfmpeg:
    """
    Stands in for `subprocess.run` when it is asked to run ffmpeg.

    It writes a marker file at the output path (the argument before `-y`) and
    exits with 0, unless the input's file name is listed in `fail_for`.
    """

    def __init__(self):
        self.calls = []
        self.fail_for = set()
        self.returncode = 1
        self.missing = False
        self._lock = threading.Lock()

    def __call__(self, cmd, **kwargs):
        with self._lock:
            self.calls.append(list(cmd))
        if self.missing:
            raise FileNotFoundError(2, "No such file or directory", cmd[0])
        if "-i" not in cmd:
            return subprocess.CompletedProcess(cmd, 0, "ffmpeg version fake", "")
        input_path = Path(cmd[cmd.index("-i") + 1])
        output_path = Path(cmd[cmd.index("-y") - 1])
        if input_path.name in self.fail_for:
            return subprocess.CompletedProcess(cmd, self.returncode, "", "Invalid data found when processing input")
        output_path.write_bytes(b"normalized:" + input_path.read_bytes())
        return subprocess.CompletedProcess(cmd, 0, "", "")


class FakeTranscoder:
    """A transcoder that never starts a process; records calls and copies bytes."""

    def __init__(self, fail_for=()):
        self.fail_for = set(fail_for)
        self.calls = []
        self._lock = threading.Lock()

    def convert(self, input_path, output_path):
        with self._lock:
            self.calls.append((Path(input_path), Path(output_path)))
        if Path(input_path).name in self.fail_for:
            return ConversionFailure(input_path=input_path, kind=FailureKind.NON_ZERO_EXIT, returncode=1)
        data = Path(input_path).read_bytes()
        Path(output_path).write_bytes(b"normalized:" + data)
        return ConversionSuccess(input_path=input_path, output_path=output_path)


@pytest.fixture
def params():
    return TargetAudioParams(sample_rate=22050, channels=1, sample_format="s16")


@pytest.fixture
def fake_ffmpeg(monkeypatch):
    fake = FakeFfmpeg()
    monkeypatch.setattr(subprocess, "run", fake)
    return fake


@pytest.fixture
def transcoder(params, fake_ffmpeg):
    return Transcoder(params, ffmpeg_cmd="ffmpeg", show_cmd=True)


@pytest.fixture
def fake_transcoder():
    return FakeTranscoder()


@pytest.fixture
def clip_dir(tmp_path):
    """A directory with one file of each category and a subdirectory."""
    directory = tmp_path / "clips"
    directory.mkdir()
    (directory / "a.mp3").write_bytes(b"ID3 mp3 data")
    (directory / "b.wav").write_bytes(b"RIFF wav data")
    (directory / "c.txt").write_text("transcript")
    sub = directory / "sub"
    sub.mkdir()
    (sub / "nested.mp3").write_bytes(b"ID3 nested")
    return directory
