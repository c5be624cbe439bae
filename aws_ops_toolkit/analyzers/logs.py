"""
Log file analysis - rank the most frequent warning and error signatures
"""

import re

import pandas as pd

from ..utils import to_utc_timestamp, utc_now
from .base import BaseAnalyzer

RANK_COLUMNS = ["Rank", "Level", "Count", "Signature", "LastSeen", "Example"]

SEVERITY = {
    "DEBUG": 10,
    "INFO": 20,
    "WARN": 30,
    "ERROR": 40,
    "CRITICAL": 50,
}
LEVEL_ALIASES = {"WARNING": "WARN", "FATAL": "CRITICAL"}
MIN_RANKED_SEVERITY = SEVERITY["WARN"]
MAX_EXAMPLE_LENGTH = 120

TIMESTAMP_RE = re.compile(
    r"^\[?(?P<ts>\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}:\d{2}(?:[.,]\d+)?"
    r"(?:Z|[+-]\d{2}:?\d{2})?)\]?"
)
LEVEL_RE = re.compile(r"\b(CRITICAL|FATAL|ERROR|WARNING|WARN|INFO|DEBUG)\b")

# Order matters: UUIDs and IPs contain digits the later patterns would eat
SIGNATURE_PATTERNS = [
    (
        re.compile(r"\b[0-9a-f]{8}-(?:[0-9a-f]{4}-){3}[0-9a-f]{12}\b", re.I),
        "<uuid>",
    ),
    (re.compile(r"\b\d{1,3}(?:\.\d{1,3}){3}(?::\d+)?\b"), "<ip>"),
    (re.compile(r"\b0x[0-9a-f]+\b|\b(?=[0-9a-f]*\d)[0-9a-f]{8,}\b", re.I), "<hex>"),
    (re.compile(r"\b\d+(?:\.\d+)?"), "<n>"),
]


def normalize_message(message):
    """Reduce a log message to a signature shared by its variants"""
    signature = message
    for pattern, placeholder in SIGNATURE_PATTERNS:
        signature = pattern.sub(placeholder, signature)
    return " ".join(signature.split())


def truncate(message, max_length=MAX_EXAMPLE_LENGTH):
    if len(message) <= max_length:
        return message
    return message[: max_length - 3] + "..."


def parse_line(line):
    """
    Parse one log line

    Returns:
        dict or None: None for lines without a level (continuations, blanks)
    """
    line = line.rstrip("\n")
    rest = line
    timestamp = None
    match = TIMESTAMP_RE.match(line)
    if match:
        try:
            timestamp = to_utc_timestamp(match.group("ts"))
        except ValueError:
            timestamp = None
        rest = line[match.end():]

    level_match = LEVEL_RE.search(rest)
    if level_match is None:
        return None
    level = LEVEL_ALIASES.get(level_match.group(1), level_match.group(1))
    message = rest[level_match.end():].lstrip(" :-]|").strip()
    return {
        "Timestamp": timestamp,
        "Level": level,
        "Severity": SEVERITY[level],
        "Message": message,
        "Signature": normalize_message(message),
    }


class LogAnalyzer(BaseAnalyzer):
    """Ranks log entries by frequency and severity within a time window"""

    title = "LOG ANALYSIS"

    def read_entries(self, path):
        """Parse a log file into a DataFrame of entries"""
        with open(path, encoding="utf-8", errors="replace") as f:
            rows = [entry for entry in map(parse_line, f) if entry is not None]
        entries = pd.DataFrame(
            rows, columns=["Timestamp", "Level", "Severity", "Message", "Signature"]
        )
        entries["Timestamp"] = pd.to_datetime(entries["Timestamp"], utc=True)
        return entries

    def analyze(self, path, since_min=0, top=10, now=None):
        """
        Rank the most relevant entries of a log file

        Args:
            path: Log file path
            since_min: Window in minutes back from now; 0 disables filtering
            top: Number of signatures to keep
            now: Reference time (UTC), defaults to the current time

        Returns:
            DataFrame with RANK_COLUMNS
        """
        entries = self.read_entries(path)

        if since_min > 0:
            now = utc_now() if now is None else now
            cutoff = now - pd.Timedelta(minutes=since_min)
            in_window = entries["Timestamp"].notna() & (entries["Timestamp"] >= cutoff)
            entries = entries[in_window]

        entries = entries[entries["Severity"] >= MIN_RANKED_SEVERITY]
        if entries.empty:
            return pd.DataFrame(columns=RANK_COLUMNS)

        ranked = (
            entries.groupby(["Level", "Signature"], sort=False)
            .agg(
                Count=("Message", "size"),
                Severity=("Severity", "first"),
                LastSeen=("Timestamp", "max"),
                Example=("Message", "last"),
            )
            .reset_index()
            .sort_values(
                ["Count", "Severity", "Signature"],
                ascending=[False, False, True],
                kind="mergesort",
            )
            .head(top)
            .reset_index(drop=True)
        )

        ranked["Rank"] = range(1, len(ranked) + 1)
        ranked["LastSeen"] = ranked["LastSeen"].map(
            lambda ts: "" if pd.isna(ts) else ts.isoformat()
        )
        ranked["Example"] = ranked["Example"].map(truncate)
        return ranked[RANK_COLUMNS]

    def summary(self, ranked, since_min):
        window = f"last {since_min} min" if since_min > 0 else "all entries"
        return f"{len(ranked)} signature(s) ranked ({window})"
