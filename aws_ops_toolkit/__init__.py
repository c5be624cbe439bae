"""
AWS Ops Toolkit

A dual-mode operations CLI for AWS:
- EC2 instance listing and health checks
- S3 cleanup of old objects (dry-run by default)
- Log file analysis
- Mock mode on canned fixtures, real mode through the aws CLI
"""

from .config import Config, GlobalOptions
from .main import OpsToolkit

__version__ = "1.0.0"
__all__ = ["Config", "GlobalOptions", "OpsToolkit"]
