"""
SysInfo QR Artifact Emitter

Renders a payload into a QR code image in the temporary directory and asks
the host to display it.

The image is built completely in memory before the file is written, so a
payload that does not fit produces PayloadTooLarge and leaves no file
behind. Failing to open the image is never fatal: the path is logged so the
operator can open it by hand.
"""

import os
import sys
import time
import logging
import tempfile
import subprocess
from pathlib import Path
from typing import Callable, Optional

import qrcode
from qrcode.exceptions import DataOverflowError
from PIL import Image

from .errors import ArtifactOpenFailure, ConfigurationError, PayloadTooLarge, UnsupportedPlatform

logger = logging.getLogger("sysinfo_qr.emitter")

ERROR_CORRECTION_LEVELS = {
    "L": qrcode.constants.ERROR_CORRECT_L,
    "M": qrcode.constants.ERROR_CORRECT_M,
    "Q": qrcode.constants.ERROR_CORRECT_Q,
    "H": qrcode.constants.ERROR_CORRECT_H,
}


def check_image_format(image_format: str) -> str:
    """Return the Pillow format name for ``image_format`` if Pillow can write it."""
    Image.init()
    name = str(image_format).upper()
    if name not in Image.SAVE:
        raise ConfigurationError(
            f"Unsupported image format: {image_format}",
            hint="use a format Pillow can write, such as png",
        )
    return name


class QRCodeRenderer:
    """
    QR code renderer backed by the ``qrcode`` package.

    The symbol version is chosen automatically; the rendered image is scaled
    to exactly ``width`` pixels square.
    """

    def __init__(self, border: int = 4):
        self.border = border

    def render(self, text: str, error_correction: str = "L", width: int = 500) -> Image.Image:
        """
        Render ``text`` as a QR code image.

        Raises:
            PayloadTooLarge: the text exceeds the capacity of the largest
                QR version at this error-correction level
            ConfigurationError: unknown error-correction level
        """
        level = ERROR_CORRECTION_LEVELS.get(str(error_correction).upper())
        if level is None:
            raise ConfigurationError(
                f"Unknown error correction level: {error_correction}",
                hint="choose one of: L, M, Q, H",
            )

        qr = qrcode.QRCode(version=None, error_correction=level, border=self.border)
        qr.add_data(text)
        try:
            qr.make(fit=True)
        except DataOverflowError as e:
            raise PayloadTooLarge(len(text), str(error_correction).upper(), str(e)) from e

        side_modules = qr.modules_count + 2 * self.border
        qr.box_size = max(1, width // side_modules)
        image = qr.make_image(fill_color="black", back_color="white").convert("RGB")
        return image.resize((width, width), Image.NEAREST)


def open_with_default_app(path: Path, platform_name: Optional[str] = None) -> None:
    """
    Open a file with the host's default application.

    Raises:
        UnsupportedPlatform: no known open command for this platform
        ArtifactOpenFailure: the open command failed
    """
    platform_name = platform_name or sys.platform
    path = str(path)

    if platform_name == "win32":
        try:
            os.startfile(path)
        except OSError as e:
            raise ArtifactOpenFailure(path, str(e)) from e
        return

    if platform_name == "darwin":
        command = ["open", path]
    elif platform_name.startswith("linux"):
        command = ["xdg-open", path]
    else:
        raise UnsupportedPlatform(path, platform_name)

    try:
        subprocess.run(command, check=True, capture_output=True)
    except (OSError, subprocess.CalledProcessError) as e:
        raise ArtifactOpenFailure(path, str(e)) from e


class ArtifactEmitter:
    """
    Writes a QR image for a payload to a unique temporary path.

    The temporary directory and clock are constructor inputs so the output
    location is fully controlled by the caller.
    """

    def __init__(
        self,
        renderer: Optional[QRCodeRenderer] = None,
        opener: Callable[[Path], None] = open_with_default_app,
        temp_dir: Optional[str] = None,
        clock: Callable[[], float] = time.time,
        file_prefix: str = "system-info-qr",
        image_format: str = "png",
    ):
        self.renderer = renderer or QRCodeRenderer()
        self.opener = opener
        self.temp_dir = Path(temp_dir or tempfile.gettempdir())
        self.clock = clock
        self.file_prefix = file_prefix
        self.save_format = check_image_format(image_format)
        self.image_format = image_format.lower()

    def artifact_path(self) -> Path:
        """Return a path stamped with the current time in milliseconds, unused so far."""
        token = int(self.clock() * 1000)
        path = self.temp_dir / f"{self.file_prefix}-{token}.{self.image_format}"
        while path.exists():
            token += 1
            path = self.temp_dir / f"{self.file_prefix}-{token}.{self.image_format}"
        return path

    def open_artifact(self, path: Path) -> bool:
        """Best-effort display of the image. Returns False if it could not be opened."""
        try:
            self.opener(path)
        except ArtifactOpenFailure as e:
            logger.warning(f"{e.message}. Please manually open: {path}")
            return False
        return True

    def emit(
        self,
        payload: str,
        error_correction: str = "L",
        width: int = 500,
        open_artifact: bool = True,
    ) -> Path:
        """
        Render ``payload`` to a new image file and optionally open it.

        Returns:
            Path of the written image

        Raises:
            PayloadTooLarge: nothing is written in this case
        """
        image = self.renderer.render(payload, error_correction=error_correction, width=width)

        path = self.artifact_path()
        self.temp_dir.mkdir(parents=True, exist_ok=True)
        try:
            image.save(path, format=self.save_format)
        except (OSError, ValueError):
            path.unlink(missing_ok=True)
            raise

        logger.info(f"QR code generated in temp directory: {path}")

        if open_artifact:
            self.open_artifact(path)
        return path
