"""
AWS Ops Toolkit - Environment check
Reports whether this machine can run the toolkit
"""

import importlib
import subprocess

from .config import EC2_FIXTURE, S3_FIXTURE

REQUIRED_PACKAGES = {"pandas": "pandas", "dotenv": "python-dotenv"}


def show_banner():
    print("🩺 AWS OPS TOOLKIT - DOCTOR")
    print("=" * 50)


def check_interpreter(config):
    """Check the interpreter at PYTHON_BIN runs"""
    print("\n🐍 INTERPRETER:")
    try:
        result = subprocess.run(
            [config.python_bin, "--version"],
            check=True,
            capture_output=True,
            text=True,
        )
    except (subprocess.CalledProcessError, OSError):
        print(f"  ✗ {config.python_bin} (not runnable, set PYTHON_BIN)")
        return False
    version = (result.stdout or result.stderr).strip()
    print(f"  ✓ {config.python_bin} ({version})")
    return True


def check_requirements():
    """Check if required packages are available"""
    print("\n🔧 DEPENDENCIES:")

    missing_packages = []
    available_packages = []
    for module, distribution in REQUIRED_PACKAGES.items():
        try:
            importlib.import_module(module)
        except ImportError:  # noqa: PERF203
            missing_packages.append(distribution)
        else:
            available_packages.append(distribution)

    for package in available_packages:
        print(f"  ✓ {package}")
    for package in missing_packages:
        print(f"  ✗ {package} (pip install {package})")
    return not missing_packages


def check_aws_cli(aws_client):
    """Report the aws CLI; only live mode needs it"""
    print("\n☁️  AWS CLI:")
    version = aws_client.version()
    if version is None:
        print(f"  ⚠ {aws_client.aws_bin} not found (only --mock mode available)")
    else:
        print(f"  ✓ {version}")
    return True


def check_fixtures(config):
    """Check the mock-mode fixture files exist"""
    print(f"\n📋 FIXTURES ({config.fixtures_dir}):")
    ok = True
    for name in (EC2_FIXTURE, S3_FIXTURE):
        path = config.fixture_path(name)
        if path.is_file():
            size_kb = path.stat().st_size / 1024
            print(f"  ✓ {name} ({size_kb:.1f} KB)")
        else:
            print(f"  ✗ {name} (missing)")
            ok = False
    return ok


def run_doctor(config, aws_client):
    """
    Run every check and print the report

    Returns:
        bool: True when all required checks pass
    """
    show_banner()
    results = [
        check_interpreter(config),
        check_requirements(),
        check_aws_cli(aws_client),
        check_fixtures(config),
    ]
    healthy = all(results)
    print()
    print("✅ Environment OK" if healthy else "❌ Environment has problems")
    return healthy
