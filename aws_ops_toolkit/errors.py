"""
Exceptions raised by the AWS Ops Toolkit

Every error carries the process exit code the CLI should return for it.
"""

USAGE_EXIT_CODE = 2


class OpsError(Exception):
    """Base class for all toolkit errors"""

    exit_code = 1
    # Report to print on stdout before the error, if any
    report = None

    def __init__(self, message, exit_code=None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class UsageError(OpsError):
    """Missing or invalid command-line argument"""

    exit_code = USAGE_EXIT_CODE


class ToolNotFoundError(OpsError):
    """A required external executable is not installed"""

    exit_code = USAGE_EXIT_CODE


class FixtureNotFoundError(OpsError):
    """A mock-mode fixture file is missing"""

    exit_code = USAGE_EXIT_CODE


class InputFileNotFoundError(OpsError):
    """A user-supplied input file is missing"""

    exit_code = USAGE_EXIT_CODE


class ConfigError(OpsError):
    """An environment setting has an invalid value"""

    exit_code = USAGE_EXIT_CODE


class MalformedInputError(OpsError):
    """A source document could not be parsed"""


class PartialDeleteError(OpsError):
    """S3 refused to delete some of the requested objects"""

    def __init__(self, failures, report=None):
        listed = ", ".join(f"{key} ({code})" for key, code in failures.items())
        super().__init__(f"{len(failures)} object(s) could not be deleted: {listed}")
        self.failures = failures
        self.report = report


class DownstreamError(OpsError):
    """An external command exited non-zero; its status is passed through"""

    def __init__(self, command, returncode, stderr=None):
        message = f"Command failed with exit status {returncode}: {' '.join(command)}"
        if stderr:
            message = f"{message}\n{stderr.strip()}"
        # Killed by signal N: report the shell convention 128 + N
        exit_code = returncode if returncode > 0 else 128 - returncode
        super().__init__(message, exit_code=exit_code)
        self.command = command
        self.returncode = returncode
