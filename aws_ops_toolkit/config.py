"""
Configuration management for AWS Ops Toolkit
"""

import os
import sys
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .errors import ConfigError

# Load environment variables
load_dotenv()

MODES = ("mock", "real")
OUTPUT_FORMATS = ("table", "structured")
FORMAT_ALIASES = {"json": "structured"}

PACKAGE_DATA_DIR = Path(__file__).resolve().parent / "data"

EC2_FIXTURE = "ec2_describe_instances.json"
S3_FIXTURE = "s3_list_objects.json"


class Config:
    """Environment-derived settings for AWS Ops Toolkit"""

    def __init__(self):
        # Executables
        self.python_bin = os.getenv("PYTHON_BIN") or sys.executable
        self.aws_cli_bin = os.getenv("AWS_CLI_BIN", "aws")

        # Fixture store for mock mode
        self.fixtures_dir = Path(os.getenv("OPS_FIXTURES_DIR", str(PACKAGE_DATA_DIR)))

        # Analysis parameters
        self.log_top_default = self._positive_int("OPS_LOG_TOP_DEFAULT", 10)

    @staticmethod
    def _positive_int(name, default):
        raw = os.getenv(name)
        if raw is None or raw.strip() == "":
            return default
        try:
            value = int(raw)
        except ValueError:
            value = 0
        if value < 1:
            raise ConfigError(f"{name} must be a positive integer, got {raw!r}")
        return value

    def fixture_path(self, name):
        """Path of a named fixture file"""
        return self.fixtures_dir / name

    def to_dict(self):
        """Convert configuration to dictionary"""
        return {
            "python_bin": self.python_bin,
            "aws_cli_bin": self.aws_cli_bin,
            "fixtures_dir": str(self.fixtures_dir),
            "log_top_default": self.log_top_default,
        }


@dataclass(frozen=True)
class GlobalOptions:
    """Options shared by every subcommand, fixed for one invocation"""

    mode: str = "mock"
    output_format: str = "table"
    profile: str | None = None
    region: str | None = None
    verbose: bool = False

    def __post_init__(self):
        if self.mode not in MODES:
            raise ValueError(f"Unknown mode: {self.mode}")
        fmt = FORMAT_ALIASES.get(self.output_format, self.output_format)
        if fmt not in OUTPUT_FORMATS:
            raise ValueError(f"Unknown output format: {self.output_format}")
        object.__setattr__(self, "output_format", fmt)

    @property
    def is_live(self):
        return self.mode == "real"

    @classmethod
    def from_args(cls, args):
        """Build options from a parsed argparse namespace"""
        return cls(
            mode=getattr(args, "mode", "mock"),
            output_format=getattr(args, "format", "table"),
            profile=getattr(args, "profile", None) or None,
            region=getattr(args, "region", None) or None,
            verbose=bool(getattr(args, "verbose", False)),
        )
