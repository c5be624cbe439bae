"""
AWS CLI client for live-mode data acquisition and S3 cleanup
"""

import json
import logging
import shutil
import subprocess

from .errors import DownstreamError, MalformedInputError, ToolNotFoundError

logger = logging.getLogger(__name__)

# S3 DeleteObjects accepts at most 1000 keys per request
DELETE_BATCH_SIZE = 1000


class AWSClient:
    """Handles AWS CLI interactions"""

    def __init__(self, config, options):
        self.config = config
        self.options = options
        self.aws_bin = config.aws_cli_bin

    def find_cli(self):
        """Return the resolved path of the aws executable, or None"""
        return shutil.which(self.aws_bin)

    def ensure_cli(self):
        """Fail fast when the aws executable is not installed"""
        path = self.find_cli()
        if path is None:
            raise ToolNotFoundError(
                "AWS CLI not found. Install awscli or run with --mock."
            )
        return path

    def version(self):
        """Version banner of the installed aws CLI, or None"""
        path = self.find_cli()
        if path is None:
            return None
        try:
            result = subprocess.run(
                [path, "--version"], check=True, capture_output=True, text=True
            )
        except (subprocess.CalledProcessError, OSError):
            return None
        # aws v1 prints its version on stderr
        return (result.stdout or result.stderr).strip()

    def base_args(self):
        """Arguments appended to every aws invocation"""
        args = []
        if self.options.profile:
            args += ["--profile", self.options.profile]
        if self.options.region:
            args += ["--region", self.options.region]
        args += ["--output", "json"]
        return args

    def command(self, *parts):
        """Full argument vector for an aws CLI call"""
        return [self.aws_bin, *parts, *self.base_args()]

    def delete_objects(self, bucket, keys):
        """
        Delete objects from a bucket using s3api delete-objects

        S3 reports per-key refusals (AccessDenied, ...) in the Errors array of
        a successful response, so the exit status alone is not enough.

        Args:
            bucket: Bucket name
            keys: Object keys to delete

        Returns:
            dict: Error code by key for every object S3 did not delete
        """
        self.ensure_cli()
        keys = list(keys)
        failures = {}
        for start in range(0, len(keys), DELETE_BATCH_SIZE):
            batch = keys[start : start + DELETE_BATCH_SIZE]
            payload = {"Objects": [{"Key": key} for key in batch], "Quiet": True}
            cmd = self.command(
                "s3api",
                "delete-objects",
                "--bucket",
                bucket,
                "--delete",
                json.dumps(payload),
            )
            logger.info(
                "aws s3api delete-objects --bucket %s (%d keys)", bucket, len(batch)
            )
            result = subprocess.run(cmd, capture_output=True, text=True, check=False)
            if result.returncode != 0:
                raise DownstreamError(cmd[:5], result.returncode, result.stderr)
            failures.update(self._delete_errors(result.stdout))

        if failures:
            logger.info("%d of %d key(s) not deleted", len(failures), len(keys))
        return failures

    def _delete_errors(self, stdout):
        try:
            response = json.loads(stdout or "{}")
        except json.JSONDecodeError as e:
            raise MalformedInputError(
                f"Invalid JSON from s3api delete-objects: {e}"
            ) from e
        if not isinstance(response, dict):
            raise MalformedInputError("Unexpected s3api delete-objects response")
        return {
            error.get("Key", ""): error.get("Code") or "Error"
            for error in response.get("Errors") or []
        }
