"""Ancestor permission probe.

Running anything inside a directory requires read access to it and to
every directory above it. Probing this up front turns an obscure failure
deep inside a later operation into an error that names the directory at
fault.
"""

import logging
import os

from treewright.core.config import DEFAULT_PERMISSIONS_CHECK_FAILSAFE
from treewright.core.errors import InvalidArgumentError

logger = logging.getLogger(__name__)


def validate_execute_permission(directory: str, *, failsafe: int | None = None) -> None:
    """Check read access on ``directory`` and each of its ancestors.

    Args:
        directory: Existing directory to probe.
        failsafe: Maximum number of directories probed.

    Raises:
        InvalidArgumentError: If ``directory`` is not a directory.
        PermissionError: If a directory in the hierarchy cannot be listed.
            The message names both ``directory`` and the offending ancestor.
        RuntimeError: If the root was not reached within ``failsafe`` steps.
    """
    if not directory or not os.path.isdir(directory):
        raise InvalidArgumentError(f"Directory not found: '{directory}'")
    limit = failsafe or DEFAULT_PERMISSIONS_CHECK_FAILSAFE

    current = os.path.abspath(directory)
    for _ in range(limit):
        try:
            with os.scandir(current) as entries:
                next(entries, None)
        except PermissionError as e:
            msg = (
                f"Permission to read the directory contents is required for '{directory}' "
                f"and each directory up the hierarchy. Access to '{current}' was denied: "
                f"{e.strerror or e}"
            )
            raise PermissionError(e.errno, msg) from e

        parent = os.path.dirname(current)
        if not parent or parent == current:
            logger.debug("Permission check passed for %s", directory)
            return
        current = parent

    msg = (
        f"Unable to validate execute permissions for directory '{directory}'. "
        "Exceeded maximum iterations."
    )
    raise RuntimeError(msg)
