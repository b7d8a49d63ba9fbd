#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richdocx/utils/decorators.py
"""Decorators shared by the serializer, the DOCX reader and the import client."""

from __future__ import annotations

import importlib
import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator

from richdocx.exceptions import DependencyError
from richdocx.utils.packages import check_version_requirement


def requires_dependencies(component_name: str, packages: list[tuple[str, str, str]]) -> Callable:
    """Check required third-party packages before running the decorated callable.

    Parameters
    ----------
    component_name : str
        Name used in the error message (e.g. ``"docx"``).
    packages : list of tuple
        ``(install_name, import_name, version_spec)`` tuples; an empty
        ``version_spec`` accepts any installed version.

    Returns
    -------
    Callable
        Decorated callable.

    Raises
    ------
    DependencyError
        If any package is missing or does not satisfy its version specifier.

    Examples
    --------
        >>> @requires_dependencies("docx", [("python-docx", "docx", ">=1.2.0")])
        ... def render(self, doc, output):
        ...     from docx import Document

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing: list[tuple[str, str]] = []
            version_mismatches: list[tuple[str, str, str]] = []
            original_error: ImportError | None = None

            for install_name, import_name, version_spec in packages:
                try:
                    importlib.import_module(import_name)
                except ImportError as e:
                    missing.append((install_name, version_spec))
                    if original_error is None:
                        original_error = e
                    continue

                if version_spec:
                    meets_requirement, installed_version = check_version_requirement(install_name, version_spec)
                    if not meets_requirement:
                        version_mismatches.append((install_name, version_spec, installed_version or "unknown"))

            if missing or version_mismatches:
                raise DependencyError(
                    component_name=component_name,
                    missing_packages=missing,
                    version_mismatches=version_mismatches,
                    original_import_error=original_error,
                ) from original_error

            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long a block took, only when DEBUG logging is enabled.

    Examples
    --------
        >>> with debug_timer(logger, "Serializing DOCX"):
        ...     renderer.render(document, buffer)

    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    yield
    logger.debug("%s completed in %.3fs", operation, time.perf_counter() - start_time)
