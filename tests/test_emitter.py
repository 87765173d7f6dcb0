"""
Tests for the Artifact Emitter

Covers:
    - QR rendering size and error-correction validation
    - Capacity-exceeded handling without leftover files
    - Unique, timestamped artifact paths
    - Best-effort opening of the image
"""

import subprocess
from unittest.mock import patch, Mock

import pytest
from PIL import Image

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sysinfo_qr.compaction import compact
from sysinfo_qr.emitter import ArtifactEmitter, QRCodeRenderer, open_with_default_app
from sysinfo_qr.errors import (
    ArtifactOpenFailure,
    ConfigurationError,
    PayloadTooLarge,
    UnsupportedPlatform,
)

FIXED_TIME = 1700000000.123


def make_emitter(tmp_path, **kwargs):
    kwargs.setdefault("opener", Mock())
    return ArtifactEmitter(temp_dir=str(tmp_path), clock=lambda: FIXED_TIME, **kwargs)


class TestQRCodeRenderer:
    """Tests for the qrcode-backed renderer."""

    def test_render_width(self):
        """Test the image is scaled to the requested width."""
        image = QRCodeRenderer().render("hello", width=500)
        assert image.size == (500, 500)

    def test_render_compact_payload(self, sample_fingerprint):
        """Test a real compact payload fits at level L."""
        payload = compact(sample_fingerprint).payload
        image = QRCodeRenderer().render(payload, error_correction="L", width=300)
        assert image.size == (300, 300)

    def test_lowercase_level_accepted(self):
        """Test error-correction level names are case-insensitive."""
        assert QRCodeRenderer().render("hello", error_correction="h", width=100).size == (100, 100)

    def test_unknown_level(self):
        """Test an invalid error-correction level is rejected."""
        with pytest.raises(ConfigurationError):
            QRCodeRenderer().render("hello", error_correction="Z")

    def test_payload_too_large(self):
        """Test data beyond version 40 capacity raises PayloadTooLarge."""
        with pytest.raises(PayloadTooLarge) as excinfo:
            QRCodeRenderer().render("x" * 5000, error_correction="L")
        assert excinfo.value.payload_length == 5000
        assert excinfo.value.error_correction == "L"
        assert "switch to the compact strategy" in excinfo.value.hint

    def test_capacity_depends_on_level(self):
        """Test a payload fitting at L can overflow at H."""
        payload = "x" * 2000
        QRCodeRenderer().render(payload, error_correction="L", width=100)
        with pytest.raises(PayloadTooLarge):
            QRCodeRenderer().render(payload, error_correction="H", width=100)


class TestArtifactPath:
    """Tests for artifact path generation."""

    def test_timestamped_name(self, tmp_path):
        """Test the path uses the prefix and a millisecond timestamp."""
        path = make_emitter(tmp_path).artifact_path()
        assert path == tmp_path / "system-info-qr-1700000000123.png"

    def test_existing_file_not_overwritten(self, tmp_path):
        """Test a colliding path moves to the next token."""
        (tmp_path / "system-info-qr-1700000000123.png").write_bytes(b"old")
        path = make_emitter(tmp_path).artifact_path()
        assert path.name == "system-info-qr-1700000000124.png"

    def test_custom_prefix_and_format(self, tmp_path):
        """Test prefix and format come from the constructor."""
        emitter = make_emitter(tmp_path, file_prefix="fp", image_format="BMP")
        assert emitter.artifact_path().name == "fp-1700000000123.bmp"

    def test_default_temp_dir(self):
        """Test the system temporary directory is used by default."""
        import tempfile
        assert ArtifactEmitter().temp_dir == Path(tempfile.gettempdir())


class TestArtifactEmitter:
    """Tests for emitting QR images."""

    def test_emit_writes_png(self, tmp_path):
        """Test a PNG of the requested width is written."""
        path = make_emitter(tmp_path).emit("hello world", width=250)

        assert path.exists()
        with Image.open(path) as image:
            assert image.format == "PNG"
            assert image.size == (250, 250)

    def test_emit_opens_image(self, tmp_path):
        """Test the opener receives the generated path."""
        opener = Mock()
        path = make_emitter(tmp_path, opener=opener).emit("hello")
        opener.assert_called_once_with(path)

    def test_emit_without_opening(self, tmp_path):
        """Test opening can be skipped."""
        opener = Mock()
        make_emitter(tmp_path, opener=opener).emit("hello", open_artifact=False)
        opener.assert_not_called()

    def test_too_large_writes_nothing(self, tmp_path):
        """Test a capacity failure leaves the directory empty."""
        opener = Mock()
        with pytest.raises(PayloadTooLarge):
            make_emitter(tmp_path, opener=opener).emit("x" * 5000)
        assert list(tmp_path.iterdir()) == []
        opener.assert_not_called()

    def test_simulated_renderer_capacity_error(self, tmp_path):
        """Test a renderer reporting capacity exceeded surfaces unchanged."""
        renderer = Mock()
        renderer.render.side_effect = PayloadTooLarge(9000, "L")
        with pytest.raises(PayloadTooLarge):
            make_emitter(tmp_path, renderer=renderer).emit("payload")
        assert list(tmp_path.iterdir()) == []

    def test_failed_save_removes_partial_file(self, tmp_path):
        """Test a save error does not leave a partial file."""
        image = Mock()

        def partial_save(path, format=None):
            Path(path).write_bytes(b"\x89PNG")
            raise OSError("disk full")

        image.save.side_effect = partial_save
        renderer = Mock()
        renderer.render.return_value = image

        with pytest.raises(OSError):
            make_emitter(tmp_path, renderer=renderer).emit("payload")
        assert list(tmp_path.iterdir()) == []

    def test_emit_jpeg(self, tmp_path):
        """Test another Pillow format is written under its own extension."""
        path = make_emitter(tmp_path, image_format="jpeg").emit("hello", width=200)
        assert path.suffix == ".jpeg"
        with Image.open(path) as image:
            assert image.format == "JPEG"

    @pytest.mark.parametrize("image_format", ["jpg", "svgz", ""])
    def test_unwritable_format_rejected(self, tmp_path, image_format):
        """Test formats Pillow cannot save are rejected before anything is rendered."""
        with pytest.raises(ConfigurationError):
            make_emitter(tmp_path, image_format=image_format)

    def test_open_failure_is_not_fatal(self, tmp_path, caplog):
        """Test an open failure is logged and the path still returned."""
        opener = Mock(side_effect=ArtifactOpenFailure("x.png", "no viewer"))
        path = make_emitter(tmp_path, opener=opener).emit("hello")

        assert path.exists()
        assert "Please manually open" in caplog.text

    def test_unsupported_platform_is_not_fatal(self, tmp_path):
        """Test an unsupported platform is handled like an open failure."""
        opener = Mock(side_effect=UnsupportedPlatform("x.png", "sunos5"))
        emitter = make_emitter(tmp_path, opener=opener)
        path = emitter.emit("hello", open_artifact=False)
        assert emitter.open_artifact(path) is False


class TestOpenWithDefaultApp:
    """Tests for the platform open command."""

    @pytest.mark.parametrize("platform_name,command", [
        ("darwin", "open"),
        ("linux", "xdg-open"),
    ])
    def test_open_command(self, platform_name, command):
        """Test the platform-specific command is invoked."""
        with patch("sysinfo_qr.emitter.subprocess.run") as mock_run:
            open_with_default_app(Path("/tmp/qr.png"), platform_name=platform_name)
        mock_run.assert_called_once()
        assert mock_run.call_args[0][0] == [command, "/tmp/qr.png"]

    def test_windows_startfile(self):
        """Test Windows uses os.startfile."""
        with patch("sysinfo_qr.emitter.os.startfile", create=True) as mock_startfile:
            open_with_default_app(Path("C:/Temp/qr.png"), platform_name="win32")
        mock_startfile.assert_called_once()

    def test_unsupported_platform(self):
        """Test unknown platforms raise UnsupportedPlatform."""
        with pytest.raises(UnsupportedPlatform) as excinfo:
            open_with_default_app(Path("/tmp/qr.png"), platform_name="aix")
        assert excinfo.value.recoverable is True
        assert excinfo.value.platform_name == "aix"

    def test_command_failure(self):
        """Test a failing open command raises ArtifactOpenFailure."""
        error = subprocess.CalledProcessError(4, ["xdg-open"])
        with patch("sysinfo_qr.emitter.subprocess.run", side_effect=error):
            with pytest.raises(ArtifactOpenFailure) as excinfo:
                open_with_default_app(Path("/tmp/qr.png"), platform_name="linux")
        assert "Please manually open" in excinfo.value.hint

    def test_command_missing(self):
        """Test a missing xdg-open raises ArtifactOpenFailure."""
        with patch("sysinfo_qr.emitter.subprocess.run", side_effect=FileNotFoundError("xdg-open")):
            with pytest.raises(ArtifactOpenFailure):
                open_with_default_app(Path("/tmp/qr.png"), platform_name="linux")
