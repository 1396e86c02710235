import errno

import numpy as np
import pytest
from pydub import AudioSegment

from mixramp.exceptions import AudioOpenError
from mixramp.streaming.chunk_loader import ChunkLoader


def test_metadata(make_wav, signals):
    path = make_wav(signals.silence(1.5, 22050), sample_rate=22050, channels=2)
    with ChunkLoader(path) as loader:
        meta = loader.get_metadata()
        assert meta.channels == 2
        assert meta.sample_rate == 22050.0
        assert meta.frame_count == 33075
        assert meta.sample_width == 2
        assert meta.duration_sec == pytest.approx(1.5)
        assert loader.frame_count == 33075


def test_read_is_interleaved_and_normalized(make_wav):
    frames = np.array([[0.5, -0.5], [0.25, 0.0], [-1.0, 1.0]])
    path = make_wav(frames, sample_rate=8000)

    with ChunkLoader(path) as loader:
        chunk = loader.read(2)
        assert chunk.dtype == np.float64
        np.testing.assert_allclose(
            chunk, [0.5, -0.5, 0.25, 0.0], atol=1 / 32768
        )

        tail = loader.read(2)
        assert tail.size == 2
        assert np.all(np.abs(tail) < 1.0)
        assert tail[0] < -0.99 and tail[1] > 0.99

        assert loader.read(2).size == 0


def test_missing_file(tmp_path):
    loader = ChunkLoader(str(tmp_path / "missing.wav"))
    with pytest.raises(AudioOpenError) as exc_info:
        loader.open()
    assert exc_info.value.errno == errno.ENOENT
    assert exc_info.value.exit_code == errno.ENOENT
    assert "missing.wav" in str(exc_info.value)


def test_read_after_close(make_wav, signals):
    path = make_wav(signals.silence(0.2, 8000), sample_rate=8000)
    with ChunkLoader(path) as loader:
        loader.read(10)
    with pytest.raises(RuntimeError):
        loader.read(10)


def test_decoded_track_is_kept_as_integer_pcm(make_wav, signals):
    path = make_wav(signals.sine(440, 1.0, 44100), channels=2)
    with ChunkLoader(path) as loader:
        # 16-bit samples stay two bytes each until read
        assert loader._samples.itemsize == 2
        assert len(loader._samples) == 2 * 44100

        chunk = loader.read(4410)
        assert chunk.dtype == np.float64
        assert chunk.size == 8820
        assert np.max(np.abs(chunk)) == pytest.approx(32767 / 32768, abs=1e-3)


def test_missing_decoder_is_not_a_missing_file(tmp_path, monkeypatch):
    path = tmp_path / "track.mp3"
    path.write_bytes(b"\xff\xfb" + b"\x00" * 64)

    def no_ffprobe(*args, **kwargs):
        raise FileNotFoundError(errno.ENOENT, "No such file or directory", "ffprobe")

    monkeypatch.setattr(AudioSegment, "from_file", no_ffprobe)

    loader = ChunkLoader(str(path))
    with pytest.raises(AudioOpenError) as exc_info:
        loader.open()
    assert exc_info.value.errno is None
    assert exc_info.value.exit_code == 1
    assert "decoder unavailable" in str(exc_info.value)
    assert "ffprobe" in str(exc_info.value)
