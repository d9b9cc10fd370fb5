"""Tests for classification of permission/connectivity check failures."""

from paulenv.engines.errors import CommandError, ConnectivityFailure, PermissionDenied
from paulenv.engines.permissions import classify_check_failure

MARKERS = ("permission denied", "access denied", "cannot connect to Podman")


def check_error(stderr: str = "", returncode: int | None = 125, reason: str | None = None) -> CommandError:
    return CommandError(["podman", "ps"], returncode, stderr=stderr, reason=reason)


def test_permission_marker_gives_permission_denied():
    """Test that a marker in stderr classifies as PermissionDenied."""
    stderr = 'Error: dial unix /run/podman/podman.sock: connect: permission denied\n'

    error = classify_check_failure("podman", check_error(stderr), MARKERS)

    assert isinstance(error, PermissionDenied)
    assert error.engine == "podman"
    assert error.stderr == stderr
    assert "Podman socket permissions" in str(error)


def test_each_marker_is_recognized():
    """Test that every marker is enough on its own."""
    for marker in MARKERS:
        error = classify_check_failure("podman", check_error(f"Error: {marker}"), MARKERS)
        assert isinstance(error, PermissionDenied), marker


def test_markers_are_case_sensitive():
    """Test that markers are matched as given."""
    error = classify_check_failure("podman", check_error("PERMISSION DENIED"), MARKERS)

    assert isinstance(error, ConnectivityFailure)


def test_other_failure_gives_connectivity_failure():
    """Test that any other check failure is a ConnectivityFailure."""
    stderr = "Error: unable to connect: no such host"

    error = classify_check_failure("podman", check_error(stderr), MARKERS)

    assert isinstance(error, ConnectivityFailure)
    assert error.stderr == stderr
    assert stderr in str(error)


def test_spawn_failure_reports_reason():
    """Test that a check that could not start reports why."""
    error = classify_check_failure(
        "podman",
        check_error(returncode=None, reason="[Errno 2] No such file or directory: 'podman'"),
        MARKERS,
    )

    assert isinstance(error, ConnectivityFailure)
    assert "No such file or directory" in str(error)


def test_connectivity_failure_keeps_check_error():
    """Test that the failed check's exit status and command reach the caller."""
    check = check_error("Error: daemon exploded", returncode=42)

    error = classify_check_failure("podman", check, MARKERS)

    assert isinstance(error, ConnectivityFailure)
    assert error.error is check
    assert "podman ps: exit status 42" in str(error)
    assert "Error: daemon exploded" in str(error)


def test_permission_denied_keeps_check_error():
    """Test that PermissionDenied carries the failed check."""
    check = check_error("Error: permission denied")

    error = classify_check_failure("podman", check, MARKERS)

    assert error.error is check
