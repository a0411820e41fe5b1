"""Notification classification and vehicle field extraction.

Everything in this package is a pure function of its inputs so it can be
tested without a mailbox.
"""

from .classifier import is_notification_subject
from .vehicle import clean_content, extract_fields, extract_vin, parse_vehicle_info

__all__ = [
    "clean_content",
    "extract_fields",
    "extract_vin",
    "is_notification_subject",
    "parse_vehicle_info",
]
