"""
Shared utility functions for AWS Ops Toolkit
"""

import pandas as pd


def name_tag(tags):
    """Value of the Name tag from an AWS tag list, or an empty string"""
    for tag in tags or []:
        if tag.get("Key") == "Name":
            return tag.get("Value", "")
    return ""


def to_utc_timestamp(value):
    """Parse a timestamp string into a UTC pandas Timestamp; naive values are UTC"""
    ts = pd.Timestamp(str(value).replace(",", "."))
    if ts.tzinfo is None:
        return ts.tz_localize("UTC")
    return ts.tz_convert("UTC")


def utc_now():
    return pd.Timestamp.now(tz="UTC")


def format_bytes(size):
    """Human-readable byte count"""
    value = float(size)
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if value < 1024 or unit == "TB":
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return f"{value:.1f} TB"
