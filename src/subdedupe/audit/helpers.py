"""Run identity and environment probes for the run manifest."""

import importlib.metadata
import platform
import secrets
import subprocess
import sys
from datetime import UTC, datetime

__all__ = [
    "PACKAGE_NAME",
    "generate_run_id",
    "get_dependency_versions",
    "get_git_sha",
    "get_package_version",
    "get_platform_info",
    "get_python_version",
    "get_transform_version",
]

PACKAGE_NAME = "subdedupe"


def generate_run_id() -> str:
    """Generate a unique run identifier.

    Returns
    -------
    str
        ``<UTC ISO8601>__<8 hex chars>``.
    """
    timestamp = datetime.now(UTC).isoformat().replace("+00:00", "Z")
    return f"{timestamp}__{secrets.token_hex(4)}"


def get_git_sha() -> str | None:
    """Short commit SHA of the working tree, or None outside a repository."""
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--short=7", "HEAD"],
            capture_output=True,
            text=True,
            check=True,
            timeout=5,
        )
    except (subprocess.SubprocessError, FileNotFoundError):
        return None
    return result.stdout.strip() or None


def get_package_version() -> str:
    """Installed subdedupe version, or "unknown" for a source checkout."""
    try:
        return importlib.metadata.version(PACKAGE_NAME)
    except importlib.metadata.PackageNotFoundError:
        return "unknown"


def get_transform_version() -> str:
    """Version tag recorded in manifests: git SHA when available."""
    sha = get_git_sha()
    return f"git:{sha}" if sha else get_package_version()


def get_python_version() -> str:
    """Interpreter version recorded in the manifest environment.

    Returns
    -------
    str
        Version such as "3.12.3".
    """
    return platform.python_version() or sys.version.split()[0]


def get_platform_info() -> str:
    """Platform string such as ``Linux-6.8.0-x86_64``."""
    return f"{platform.system()}-{platform.release()}-{platform.machine()}"


def get_dependency_versions(packages: list[str]) -> dict[str, str]:
    """Look up installed distribution versions.

    Parameters
    ----------
    packages : list[str]
        Distribution names, e.g. ["click", "jsonschema"].

    Returns
    -------
    dict[str, str]
        Version per name; packages that are not installed map to "unknown".
    """
    versions: dict[str, str] = {}
    for package in packages:
        try:
            versions[package] = importlib.metadata.version(package)
        except importlib.metadata.PackageNotFoundError:
            versions[package] = "unknown"
    return versions
