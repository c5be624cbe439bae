"""
Analysis modules for AWS resources and log files
"""

from .ec2 import InstanceHealthChecker, InstanceLister
from .logs import LogAnalyzer
from .s3 import StorageCleaner

__all__ = [
    "InstanceHealthChecker",
    "InstanceLister",
    "LogAnalyzer",
    "StorageCleaner",
]
