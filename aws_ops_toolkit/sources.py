"""
Data sources: where the raw record set for a resource query comes from

Mock mode reads a fixture file, live mode streams the stdout of an aws CLI
call. Both hand the analyzer a text stream, so analyzers never know which
one produced the document.
"""

import json
import logging
import subprocess
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path

from .errors import (
    DownstreamError,
    FixtureNotFoundError,
    MalformedInputError,
    ToolNotFoundError,
)

logger = logging.getLogger(__name__)


class DataSource(ABC):
    """Produces the raw document for a resource query"""

    @abstractmethod
    def open(self):
        """Context manager yielding a readable text stream"""

    @abstractmethod
    def describe(self):
        """Short human-readable description of the source"""

    def load(self):
        """Read and decode the JSON document from this source"""
        with self.open() as stream:
            try:
                return json.load(stream)
            except json.JSONDecodeError as e:
                raise MalformedInputError(
                    f"Invalid JSON from {self.describe()}: {e}"
                ) from e


class FixtureSource(DataSource):
    """Reads a canned response from a fixture file"""

    def __init__(self, path):
        self.path = Path(path)

    def describe(self):
        return str(self.path)

    @contextmanager
    def open(self):
        if not self.path.is_file():
            raise FixtureNotFoundError(f"Mock file not found: {self.path}")
        logger.info("mode=mock source=%s", self.path)
        with self.path.open(encoding="utf-8") as stream:
            yield stream


class LiveSource(DataSource):
    """Streams the stdout of an aws CLI subprocess"""

    def __init__(self, command):
        self.command = list(command)

    def describe(self):
        return " ".join(self.command)

    @contextmanager
    def open(self):
        logger.info("mode=real source=stdin")
        logger.info("%s", self.describe())
        try:
            # stderr is inherited so aws error messages reach the user directly
            proc = subprocess.Popen(self.command, stdout=subprocess.PIPE, text=True)
        except FileNotFoundError as e:
            raise ToolNotFoundError(
                "AWS CLI not found. Install awscli or run with --mock."
            ) from e

        try:
            yield proc.stdout
        except Exception:
            proc.stdout.close()
            returncode = proc.wait()
            if returncode != 0:
                # The child failed first; its status is the real error
                raise DownstreamError(self.command, returncode) from None
            raise
        except BaseException:
            proc.kill()
            proc.wait()
            raise

        proc.stdout.close()
        returncode = proc.wait()
        if returncode != 0:
            raise DownstreamError(self.command, returncode)
