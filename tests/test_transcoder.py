import os
import stat
import sys

import pytest

from speech_normalizer.config.audio import IN_PLACE_TEMP_PREFIX
from speech_normalizer.domain.models import ConversionFailure, ConversionSuccess, FailureKind, TargetAudioParams
from speech_normalizer.services import transcoder as transcoder_module
from speech_normalizer.services.transcoder import Transcoder


def test_convert_to_sibling_reports_success(tmp_path, transcoder, fake_ffmpeg):
    source = tmp_path / "a.mp3"
    source.write_bytes(b"mp3")
    target = tmp_path / "a.wav"

    outcome = transcoder.convert(source, target)

    assert isinstance(outcome, ConversionSuccess)
    assert outcome.ok
    assert outcome.output_path == target
    assert target.read_bytes() == b"normalized:mp3"
    # Converting to a new path leaves the source alone; deleting it is the worker's job.
    assert source.exists()
    cmd = fake_ffmpeg.calls[0]
    assert cmd[cmd.index("-ar") + 1] == "22050"
    assert cmd[cmd.index("-ac") + 1] == "1"
    assert cmd[cmd.index("-sample_fmt") + 1] == "s16"


def test_non_zero_exit_is_a_tagged_failure(tmp_path, transcoder, fake_ffmpeg):
    source = tmp_path / "bad.mp3"
    source.write_bytes(b"garbage")
    fake_ffmpeg.fail_for.add("bad.mp3")
    fake_ffmpeg.returncode = 183

    outcome = transcoder.convert(source, tmp_path / "bad.wav")

    assert isinstance(outcome, ConversionFailure)
    assert not outcome.ok
    assert outcome.kind is FailureKind.NON_ZERO_EXIT
    assert outcome.returncode == 183
    assert outcome.message == "conversion failed"
    assert "Invalid data" in outcome.stderr


def test_missing_executable_is_a_launch_failure(tmp_path, transcoder, fake_ffmpeg):
    source = tmp_path / "a.mp3"
    source.write_bytes(b"mp3")
    fake_ffmpeg.missing = True

    outcome = transcoder.convert(source, tmp_path / "a.wav")

    assert outcome.kind is FailureKind.LAUNCH_FAILED
    assert outcome.returncode is None
    assert not (tmp_path / "a.wav").exists()


def test_in_place_reencode_replaces_file_and_cleans_temp(tmp_path, transcoder, fake_ffmpeg):
    source = tmp_path / "b.wav"
    source.write_bytes(b"wav")

    outcome = transcoder.convert(source, source)

    assert outcome.ok
    assert outcome.output_path == source
    assert source.read_bytes() == b"normalized:wav"
    # ffmpeg never reads and writes the same file.
    cmd = fake_ffmpeg.calls[0]
    written = cmd[cmd.index("-y") - 1]
    assert os.path.basename(written).startswith(IN_PLACE_TEMP_PREFIX)
    assert sorted(p.name for p in tmp_path.iterdir()) == ["b.wav"]


def test_in_place_failure_keeps_original(tmp_path, transcoder, fake_ffmpeg):
    source = tmp_path / "b.wav"
    source.write_bytes(b"original")
    fake_ffmpeg.fail_for.add("b.wav")

    outcome = transcoder.convert(source, source)

    assert outcome.kind is FailureKind.NON_ZERO_EXIT
    assert source.read_bytes() == b"original"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["b.wav"]


def test_in_place_replace_failure_is_a_staging_failure(tmp_path, transcoder, fake_ffmpeg, monkeypatch):
    source = tmp_path / "b.wav"
    source.write_bytes(b"original")

    def failing_replace(src, dst):
        raise PermissionError(13, "Permission denied", str(dst))

    monkeypatch.setattr(transcoder_module.os, "replace", failing_replace)
    outcome = transcoder.convert(source, source)

    assert outcome.kind is FailureKind.STAGING_FAILED
    assert source.read_bytes() == b"original"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["b.wav"]


def test_params_are_taken_from_the_instance(tmp_path, fake_ffmpeg):
    source = tmp_path / "a.mp3"
    source.write_bytes(b"mp3")
    Transcoder(TargetAudioParams(sample_rate=44100, channels=2), show_cmd=False).convert(source, tmp_path / "a.wav")

    cmd = fake_ffmpeg.calls[0]
    assert cmd[cmd.index("-ar") + 1] == "44100"
    assert cmd[cmd.index("-ac") + 1] == "2"


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX permission bits")
def test_in_place_reencode_keeps_file_mode(tmp_path, transcoder, fake_ffmpeg):
    source = tmp_path / "b.wav"
    source.write_bytes(b"wav")
    source.chmod(0o644)

    outcome = transcoder.convert(source, source)

    assert outcome.ok
    assert stat.S_IMODE(source.stat().st_mode) == 0o644


def test_commands_are_not_shown_by_default(params):
    assert Transcoder(params).show_cmd is False
