#!/usr/bin/env python3
"""
AWS Ops Toolkit (dual-mode)
Inspects and manages EC2, S3 and log files on canned fixtures (--mock, the
default) or through the installed aws CLI (--real).

USAGE EXAMPLES:
  ./ops.py doctor
  ./ops.py ec2 list                                  # Fixture data
  ./ops.py ec2 health --real --profile prod --region us-east-1
  ./ops.py s3 clean my-bucket --older-than 30        # Dry-run
  ./ops.py s3 clean my-bucket --older-than 30 --apply --real
  ./ops.py logs analyze logs/app.log --since-min 60 --top 5 --format structured

  # Or use the installed console script:
  aws-ops ec2 list
"""

import sys

from aws_ops_toolkit.cli import main

if __name__ == "__main__":
    sys.exit(main())
