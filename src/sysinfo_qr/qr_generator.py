"""
SysInfo QR Generator

Main script: collects a hardware fingerprint of this machine, compacts it
into a QR-safe payload and renders the payload as a QR code image in the
temporary directory, then opens the image for scanning.

Usage:
    sysinfo-qr [--config path/to/config.yaml] [--strategy compact|plain]
               [--no-open] [--dump] [--verbose]
"""

import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List

from .compaction import CompactionStrategy, check_brotli_quality, compact
from .emitter import ArtifactEmitter, QRCodeRenderer
from .errors import ConfigurationError, InventoryCollectionFailure, PayloadTooLarge
from .fingerprint import FingerprintBuilder
from .utils import load_config, setup_logging

# Module logger
logger = logging.getLogger("sysinfo_qr.generator")

ENCODING_NOTES = {
    CompactionStrategy.COMPACT: "Data is base64 encoded, Brotli compressed, and MessagePack encoded.",
    CompactionStrategy.PLAIN: "Data is base64 encoded JSON.",
}


class QRGenerator:
    """
    Single-shot pipeline: fingerprint -> payload -> QR image.

    Nothing is retried; running the tool again is the retry.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        builder: Optional[FingerprintBuilder] = None,
        emitter: Optional[ArtifactEmitter] = None,
    ):
        self.config = config
        general_config = config.get("general", {})
        qr_config = config.get("qr", {})

        self.strategy = CompactionStrategy.from_name(general_config.get("strategy", "compact"))
        self.open_artifact = general_config.get("open_artifact", True)
        self.brotli_quality = check_brotli_quality(config.get("compression", {}).get("brotli_quality", 11))
        self.error_correction = qr_config.get("error_correction", "L")
        self.width = qr_config.get("width", 500)

        self.builder = builder or FingerprintBuilder(config=config)
        self.emitter = emitter or ArtifactEmitter(
            renderer=QRCodeRenderer(border=qr_config.get("border", 4)),
            file_prefix=qr_config.get("file_prefix", "system-info-qr"),
            image_format=qr_config.get("image_format", "png"),
        )

    def run(self) -> Path:
        """
        Build, compact and render the fingerprint.

        Returns:
            Path of the generated image

        Raises:
            InventoryCollectionFailure: inventory could not be collected
            PayloadTooLarge: payload does not fit in a QR code
        """
        fingerprint = self.builder.build()
        result = compact(fingerprint, self.strategy, brotli_quality=self.brotli_quality)

        for line in result.summary_lines():
            print(line)

        path = self.emitter.emit(
            result.payload,
            error_correction=self.error_correction,
            width=self.width,
            open_artifact=False,
        )
        print(f"QR code generated in temp directory: {path}")

        if self.open_artifact:
            print("Opening QR code for scanning...")
            if not self.emitter.open_artifact(path):
                print(f"Please manually open: {path}")
        print(f"Note: {ENCODING_NOTES[self.strategy]}")
        return path

    def dump(self) -> Dict[str, Any]:
        """Collect the fingerprint and return it without rendering anything."""
        return self.builder.build().to_dict()


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="SysInfo QR - Encode this machine's hardware fingerprint as a QR code"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
        default=None
    )
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in CompactionStrategy],
        help="Payload encoding strategy (overrides the configuration)",
        default=None
    )
    parser.add_argument(
        "--no-open",
        action="store_true",
        help="Do not open the generated image"
    )
    parser.add_argument(
        "--dump",
        action="store_true",
        help="Print the fingerprint as JSON instead of generating a QR code"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose output"
    )
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the QR generator."""
    args = parse_args(argv)

    config = load_config(args.config)
    if args.verbose:
        config.setdefault("debug", {})["verbose"] = True
    if args.strategy:
        config.setdefault("general", {})["strategy"] = args.strategy
    if args.no_open:
        config.setdefault("general", {})["open_artifact"] = False
    setup_logging(config)

    try:
        generator = QRGenerator(config)
        if args.dump:
            print(json.dumps(generator.dump(), indent=2, ensure_ascii=False))
        else:
            generator.run()
    except InventoryCollectionFailure as e:
        logger.debug("Inventory collection failed", exc_info=True)
        print(f"Failed to collect system information: {e.message}", file=sys.stderr)
        return 1
    except PayloadTooLarge as e:
        print(f"Failed to generate QR code: {e.message}", file=sys.stderr)
        print(f"Data might still be too large for QR code. Consider: {e.hint}.", file=sys.stderr)
        return 1
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
