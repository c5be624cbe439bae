"""
Main orchestrator for AWS Ops Toolkit
"""

import logging
from pathlib import Path

from .analyzers import (
    InstanceHealthChecker,
    InstanceLister,
    LogAnalyzer,
    StorageCleaner,
)
from .analyzers.s3 import ACTION_DELETED, ACTION_DELETED_MOCK, ACTION_FAILED
from .aws_client import AWSClient
from .config import EC2_FIXTURE, S3_FIXTURE, Config, GlobalOptions
from .data_processor import DataProcessor
from .doctor import run_doctor
from .errors import InputFileNotFoundError, PartialDeleteError, UsageError
from .formatter import render
from .sources import FixtureSource, LiveSource

logger = logging.getLogger(__name__)


class OpsToolkit:
    """Runs one subcommand: pick a data source, analyze, format"""

    def __init__(self, options=None, config=None, aws_client=None):
        """
        Initialize the toolkit for one invocation

        Args:
            options: GlobalOptions parsed from the command line
            config: Environment configuration (defaults to Config())
            aws_client: AWS CLI client (defaults to one built from config)
        """
        self.options = options or GlobalOptions()
        self.config = config or Config()
        self.aws_client = aws_client or AWSClient(self.config, self.options)

        # Initialize components
        self.data_processor = DataProcessor(self.config)
        self.instance_lister = InstanceLister(self.config, self.data_processor)
        self.health_checker = InstanceHealthChecker(self.config, self.data_processor)
        self.storage_cleaner = StorageCleaner(self.config, self.data_processor)
        self.log_analyzer = LogAnalyzer(self.config, self.data_processor)

    def data_source(self, fixture, *aws_args):
        """
        Source for a resource query in the active mode

        Live mode checks for the aws CLI here, before anything is spawned.
        """
        if self.options.is_live:
            self.aws_client.ensure_cli()
            return LiveSource(self.aws_client.command(*aws_args))
        return FixtureSource(self.config.fixture_path(fixture))

    def _render(self, analyzer, frame, **kwargs):
        return render(frame, self.options.output_format, title=analyzer.title, **kwargs)

    def doctor(self):
        return run_doctor(self.config, self.aws_client)

    def ec2_list(self):
        document = self.data_source(EC2_FIXTURE, "ec2", "describe-instances").load()
        instances = self.instance_lister.analyze(document)
        return self._render(self.instance_lister, instances)

    def ec2_health(self):
        document = self.data_source(EC2_FIXTURE, "ec2", "describe-instances").load()
        health = self.health_checker.analyze(document)
        return self._render(
            self.health_checker, health, footer=self.health_checker.summary(health)
        )

    def s3_clean(self, bucket, older_than, apply=False, now=None):
        """
        Report or delete objects older than `older_than` days

        Nothing is deleted unless apply is True; in mock mode deletion is
        only reported.
        Keys S3 refuses to delete raise PartialDeleteError, which carries
        the rendered report.
        """
        if not bucket:
            raise UsageError(
                "Missing bucket. Example: aws-ops s3 clean my-bucket --older-than 30"
            )
        if older_than is None or older_than < 0:
            raise UsageError("Missing --older-than DAYS")

        source = self.data_source(
            S3_FIXTURE, "s3api", "list-objects-v2", "--bucket", bucket
        )
        selected = self.storage_cleaner.analyze(source.load(), older_than, now=now)

        failures = {}
        if apply and not selected.empty:
            if self.options.is_live:
                failures = self.aws_client.delete_objects(
                    bucket, selected["Key"].tolist()
                )
                selected["Action"] = [
                    f"{ACTION_FAILED}: {failures[key]}" if key in failures
                    else ACTION_DELETED
                    for key in selected["Key"]
                ]
            else:
                logger.info(
                    "mode=mock: %d object(s) not actually deleted", len(selected)
                )
                selected["Action"] = ACTION_DELETED_MOCK
        elif not apply:
            logger.info("dry-run: pass --apply to delete")

        summary = self.storage_cleaner.summary(selected)
        report = self._render(
            self.storage_cleaner,
            selected,
            footer=f"{summary}{'' if apply else ' - dry-run, nothing deleted'}",
            extra={
                "bucket": bucket,
                "older_than_days": older_than,
                "apply": bool(apply),
                "mode": self.options.mode,
                "total_objects": len(selected),
                "total_bytes": int(selected["Size"].sum()) if not selected.empty else 0,
            },
            key="objects",
        )
        if failures:
            raise PartialDeleteError(failures, report=report)
        return report

    def logs_analyze(self, path, since_min=0, top=None, now=None):
        """Rank warning and error signatures in a local log file"""
        if not path:
            raise UsageError(
                "Missing log path. Example: aws-ops logs analyze logs/app.log"
            )
        if not Path(path).is_file():
            raise InputFileNotFoundError(f"Log file not found: {path}")
        top = self.config.log_top_default if top is None else top
        if top < 1:
            raise UsageError(f"--top must be a positive integer, got {top}")

        logger.info("analyzing %s since_min=%s top=%s", path, since_min, top)
        ranked = self.log_analyzer.analyze(path, since_min=since_min, top=top, now=now)
        return self._render(
            self.log_analyzer,
            ranked,
            footer=self.log_analyzer.summary(ranked, since_min),
            extra={"path": str(path), "since_min": since_min, "top": top},
            key="entries",
        )
