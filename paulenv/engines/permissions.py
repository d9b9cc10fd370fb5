"""Classification of engine failures caused by permissions or connectivity.

After a failed operation, engines run a side-effect free check (listing
running containers). The check's outcome, not the stderr of the failed
operation, decides whether the engine itself is unreachable.
"""

from __future__ import annotations

from paulenv.engines.errors import (
    CommandError,
    ConnectivityFailure,
    PermissionDenied,
)


def classify_check_failure(
    engine: str,
    error: CommandError,
    markers: tuple[str, ...],
) -> PermissionDenied | ConnectivityFailure:
    """Map a failed check to PermissionDenied or ConnectivityFailure.

    Args:
        engine: Engine name, used in error messages
        error: The check's failure, with its captured stderr
        markers: Substrings of stderr identifying a permission problem

    Returns:
        The error to raise in place of the original failure
    """
    stderr = error.stderr or ""
    if any(marker in stderr for marker in markers):
        return PermissionDenied(engine, stderr, error=error)
    return ConnectivityFailure(engine, stderr, error=error)
