"""
S3 cleanup candidate selection
"""

import pandas as pd

from ..utils import format_bytes, utc_now
from .base import BaseAnalyzer

CLEAN_COLUMNS = ["Key", "Size", "LastModified", "AgeDays", "Action"]

ACTION_DRY_RUN = "would-delete"
ACTION_DELETED = "deleted"
ACTION_DELETED_MOCK = "deleted (mock)"
ACTION_FAILED = "failed"


class StorageCleaner(BaseAnalyzer):
    """Selects objects older than an age threshold"""

    title = "S3 CLEANUP"

    def analyze(self, document, older_than_days, now=None):
        """
        Select objects last modified strictly before now - older_than_days

        Args:
            document: Decoded JSON of `aws s3api list-objects-v2`
            older_than_days: Age threshold in days
            now: Reference time (UTC), defaults to the current time

        Returns:
            DataFrame of candidates in listing order, Action set to dry-run
        """
        now = utc_now() if now is None else now
        objects = self.data_processor.objects_frame(document)
        cutoff = now - pd.Timedelta(days=older_than_days)

        selected = objects[objects["LastModifiedUtc"] < cutoff].copy()
        ages = now - selected["LastModifiedUtc"]
        selected["AgeDays"] = ages.dt.days.astype("int64")
        selected["Action"] = ACTION_DRY_RUN
        return selected[CLEAN_COLUMNS].reset_index(drop=True)

    def summary(self, selected):
        total = int(selected["Size"].sum()) if not selected.empty else 0
        return f"{len(selected)} object(s), {total} bytes ({format_bytes(total)})"
