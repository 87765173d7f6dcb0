"""
SysInfo QR Error Types

Every failure the pipeline reports derives from SysInfoQRError so callers can
catch a single type. Each error carries a short machine-readable code, an
operator hint and whether the run can continue after it.
"""

from typing import Optional


class SysInfoQRError(Exception):
    """Base error for the fingerprint pipeline."""

    code = "SYSINFO_QR_ERROR"

    def __init__(
        self,
        message: str,
        hint: str = "",
        recoverable: bool = False,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.recoverable = recoverable
        if code:
            self.code = code

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message} ({self.hint})"
        return self.message


class ConfigurationError(SysInfoQRError):
    """A configuration value is outside the supported set."""

    code = "INVALID_CONFIG"


class InventoryCollectionFailure(SysInfoQRError):
    """An inventory query raised; the whole build is abandoned."""

    code = "INVENTORY_COLLECTION_FAILED"

    def __init__(self, category: str, cause: BaseException):
        super().__init__(
            f"Failed to collect {category} information: {cause}",
            hint="re-run the tool once the inventory source is available",
        )
        self.category = category
        self.cause = cause


class PayloadTooLarge(SysInfoQRError):
    """The QR renderer cannot fit the payload at the requested settings."""

    code = "PAYLOAD_TOO_LARGE"

    def __init__(self, payload_length: int, error_correction: str, detail: str = ""):
        message = (
            f"Payload of {payload_length} characters does not fit in a QR code "
            f"at error correction level {error_correction}"
        )
        if detail:
            message = f"{message}: {detail}"
        super().__init__(
            message,
            hint="reduce the information collected or switch to the compact strategy",
        )
        self.payload_length = payload_length
        self.error_correction = error_correction


class ArtifactOpenFailure(SysInfoQRError):
    """The host could not open the generated image. Never fatal."""

    code = "ARTIFACT_OPEN_FAILED"

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Failed to open image {path}: {reason}",
            hint=f"Please manually open: {path}",
            recoverable=True,
        )
        self.path = path


class UnsupportedPlatform(ArtifactOpenFailure):
    """No known 'open file' command for this platform."""

    code = "UNSUPPORTED_PLATFORM"

    def __init__(self, path: str, platform_name: str):
        super().__init__(path, f"Unsupported platform: {platform_name}")
        self.platform_name = platform_name
