"""
tests/conftest.py - shared pytest fixtures

Provides an isolated environment, a fake `aws` executable and sample logs.

Usage:
    def test_something(fake_aws, sample_log):
        # fake_aws: path to a stand-in aws CLI, wired in via AWS_CLI_BIN
        # sample_log: path to a small application log
        pass
"""

import json
import stat
import textwrap
from pathlib import Path

import pandas as pd
import pytest

from aws_ops_toolkit.config import PACKAGE_DATA_DIR, Config, GlobalOptions
from aws_ops_toolkit.data_processor import DataProcessor

NOW = pd.Timestamp("2026-10-15T12:00:00Z")


# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Keep the developer's environment out of the tests"""
    for name in ("PYTHON_BIN", "AWS_CLI_BIN", "OPS_FIXTURES_DIR", "OPS_LOG_TOP_DEFAULT"):
        monkeypatch.delenv(name, raising=False)
    # An aws binary that never exists unless a test installs fake_aws
    monkeypatch.setenv("AWS_CLI_BIN", "aws-not-installed-for-tests")
    yield


@pytest.fixture
def config():
    return Config()


@pytest.fixture
def data_processor(config):
    return DataProcessor(config)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def ec2_document():
    return json.loads((PACKAGE_DATA_DIR / "ec2_describe_instances.json").read_text())


@pytest.fixture
def s3_document():
    return json.loads((PACKAGE_DATA_DIR / "s3_list_objects.json").read_text())


@pytest.fixture
def live_options():
    return GlobalOptions(mode="real", profile="ops", region="eu-west-1")


# =============================================================================
# Fake aws CLI
# =============================================================================

FAKE_AWS_SCRIPT = """\
#!/bin/sh
# Stand-in for the aws CLI: records its arguments, replays fixtures
echo "$@" >> "{calls}"
if [ -n "$FAKE_AWS_EXIT" ]; then
    echo "fake aws failure" >&2
    exit "$FAKE_AWS_EXIT"
fi
case "$1 $2" in
    "--version ")
        echo "aws-cli/2.15.0 Python/3.11.6 Linux/6.0 exe/x86_64"
        ;;
    "ec2 describe-instances")
        cat "{data}/ec2_describe_instances.json"
        ;;
    "s3api list-objects-v2")
        cat "{data}/s3_list_objects.json"
        ;;
    "s3api delete-objects")
        if [ -n "$FAKE_AWS_DELETE_RESPONSE" ]; then
            printf '%s\n' "$FAKE_AWS_DELETE_RESPONSE"
        else
            echo '{{}}'
        fi
        ;;
    *)
        echo "unknown command: $@" >&2
        exit 252
        ;;
esac
"""


class FakeAws:
    """Handle on the fake aws executable and the calls it received"""

    def __init__(self, path, calls):
        self.path = path
        self.calls_file = calls

    @property
    def calls(self):
        if not self.calls_file.exists():
            return []
        return self.calls_file.read_text().splitlines()


@pytest.fixture
def fake_aws(tmp_path, monkeypatch):
    """Install a fake aws CLI and point AWS_CLI_BIN at it"""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    calls = tmp_path / "aws_calls.txt"
    script = bin_dir / "aws"
    script.write_text(FAKE_AWS_SCRIPT.format(calls=calls, data=PACKAGE_DATA_DIR))
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    monkeypatch.setenv("AWS_CLI_BIN", str(script))
    return FakeAws(script, calls)


# =============================================================================
# Logs
# =============================================================================

SAMPLE_LOG = textwrap.dedent(
    """\
    2026-10-15T09:00:00Z INFO service started on port 8080
    2026-10-15T09:01:00Z ERROR Timeout after 30s talking to 10.0.1.15:5432
    2026-10-15T09:02:00Z ERROR Timeout after 45s talking to 10.0.1.16:5432
    2026-10-15T09:03:00Z WARN Slow request 1532ms on /api/orders
        at handler (orders.py:42)
    2026-10-15T11:40:00Z ERROR Timeout after 31s talking to 10.0.1.15:5432
    2026-10-15T11:45:00Z WARNING Slow request 2210ms on /api/orders
    2026-10-15T11:50:00Z CRITICAL Disk full on /dev/xvda1
    2026-10-15 11:55:00,120 ERROR User 4f9c2d1e-8a7b-4c3d-9e0f-1a2b3c4d5e6f not found
    DEBUG cache warmup done
    """
)


@pytest.fixture
def sample_log(tmp_path):
    path = tmp_path / "app.log"
    path.write_text(SAMPLE_LOG)
    return path


@pytest.fixture
def fixtures_dir(tmp_path, monkeypatch):
    """Empty fixture directory wired in through OPS_FIXTURES_DIR"""
    directory = tmp_path / "fixtures"
    directory.mkdir()
    monkeypatch.setenv("OPS_FIXTURES_DIR", str(directory))
    return Path(directory)
