"""
Device Classifiers Module

Heuristics that turn raw inventory lists into fingerprint fields.

Available Classifiers:
    - storage_drive_type / total_storage_size: disk layout
    - has_webcam / has_keyboard / has_mouse: peripheral presence
    - monitor_topology: display connection layout
"""

from .device_classifier import (
    storage_drive_type,
    total_storage_size,
    has_webcam,
    has_keyboard,
    has_mouse,
    normalize_connection,
    monitor_topology,
)

__all__ = [
    "storage_drive_type",
    "total_storage_size",
    "has_webcam",
    "has_keyboard",
    "has_mouse",
    "normalize_connection",
    "monitor_topology",
]
