"""
SysInfo QR - Hardware Fingerprint to QR Code

Collects a small, fixed-schema hardware fingerprint of the host and encodes
it into a scannable QR code image.

Modules:
    - qr_generator: Command-line entry point
    - fingerprint: Concurrent inventory collection and fingerprint assembly
    - compaction: MessagePack/Brotli/base64 payload pipeline
    - emitter: QR rendering and image display
    - adapters: Per-category inventory adapters for Linux, macOS and Windows
    - classifiers: Heuristics mapping raw inventory to fingerprint fields
    - utils: Configuration, logging and platform query helpers
"""

__version__ = "1.0.0"
__author__ = "SysInfo QR Contributors"
__license__ = "Apache-2.0"
