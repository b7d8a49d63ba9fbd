"""Helpers for checking installed package versions."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# src/richdocx/utils/packages.py
from __future__ import annotations

from importlib import metadata

from packaging import version
from packaging.specifiers import InvalidSpecifier, SpecifierSet


def get_package_version(package_name: str) -> str | None:
    """Return the installed version of a distribution, or None when it is not installed."""
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> tuple[bool, str | None]:
    """Check if an installed distribution satisfies a version specifier.

    Parameters
    ----------
    package_name : str
        Distribution name on the package index (e.g. ``python-docx``)
    version_spec : str
        Version specification (e.g. ``">=1.2.0"``)

    Returns
    -------
    tuple
        (meets_requirement, installed_version)

    """
    installed_version = get_package_version(package_name)
    if not installed_version:
        return False, None

    try:
        spec = SpecifierSet(version_spec)
    except InvalidSpecifier:
        return True, installed_version
    return version.parse(installed_version) in spec, installed_version
