"""Tests for the Docker engine.

Only behaviour that differs from Podman is covered in depth; the shared
command pipeline is exercised through the Podman tests.
"""

import pytest

from paulenv.engines.base import ImageInfo
from paulenv.engines.errors import (
    CommandError,
    ConnectivityFailure,
    PermissionDenied,
    RemoveFailed,
    UnknownVersionFormat,
)
from paulenv.engines.invoker import CommandResult


def ok(stdout: str = "") -> CommandResult:
    return CommandResult(args=[], returncode=0, stdout=stdout)


def failed(returncode: int = 1, stderr: str = "") -> CommandError:
    return CommandError(["docker"], returncode, stderr=stderr)


def test_name(docker_engine):
    """Test engine naming."""
    assert docker_engine.name == "docker"
    assert docker_engine.display_name == "Docker"
    assert docker_engine.binary == "docker"


@pytest.mark.asyncio
async def test_info(docker_engine):
    """Test that Docker's version banner is parsed."""
    docker_engine._run.return_value = ok("Docker version 24.0.7, build afdd53b\n")

    info = await docker_engine.info()

    assert info.name == "docker"
    assert info.version == "24.0.7"


@pytest.mark.asyncio
async def test_info_rejects_podman_banner(docker_engine):
    """Test that a foreign banner is not accepted."""
    docker_engine._run.return_value = ok("podman version 4.3.1")

    with pytest.raises(UnknownVersionFormat):
        await docker_engine.info()


@pytest.mark.asyncio
async def test_prune_build_cache(docker_engine):
    """Test that Docker prunes the BuildKit cache."""
    docker_engine._run.return_value = ok()

    await docker_engine.prune_build_cache()

    assert docker_engine._run.call_args.args[0] == [
        "builder", "prune", "-f", "--filter", "label=paulenv=true",
    ]


@pytest.mark.asyncio
async def test_has_been_built_not_found(docker_engine):
    """Test Docker's not-found exit code."""
    docker_engine._run.side_effect = [failed(1, "Error: No such image: paulenv:myproj"), ok()]

    assert await docker_engine.has_been_built("myproj") is False


@pytest.mark.asyncio
async def test_daemon_socket_permission(docker_engine):
    """Test Docker's socket permission message."""
    stderr = (
        "permission denied while trying to connect to the Docker daemon socket "
        "at unix:///var/run/docker.sock"
    )
    docker_engine._run.side_effect = [failed(1), failed(1, stderr)]

    with pytest.raises(PermissionDenied) as exc_info:
        await docker_engine.remove_image(ImageInfo(image_name="paulenv:myproj"))

    assert "Docker socket permissions" in str(exc_info.value)


@pytest.mark.asyncio
async def test_daemon_not_running(docker_engine):
    """Test that a stopped daemon is reported as a permission problem."""
    stderr = "Cannot connect to the Docker daemon at unix:///var/run/docker.sock. Is the docker daemon running?"
    docker_engine._run.side_effect = [failed(1), failed(1, stderr)]

    with pytest.raises(PermissionDenied):
        await docker_engine.list_images()


@pytest.mark.asyncio
async def test_named_pipe_access_denied(docker_engine):
    """Test Docker Desktop's named pipe refusal on Windows."""
    stderr = (
        "error during connect: this error may indicate that the docker daemon is not running: "
        "open //./pipe/docker_engine: Access is denied."
    )
    docker_engine._run.side_effect = [failed(1), failed(1, stderr)]

    with pytest.raises(PermissionDenied):
        await docker_engine.list_containers()


def test_permission_markers_are_distinct(docker_engine):
    """Test that no marker is a substring of another one."""
    markers = docker_engine.permission_markers
    for marker in markers:
        assert not any(marker != other and marker in other for other in markers), marker


@pytest.mark.asyncio
async def test_other_check_failure(docker_engine):
    """Test that other check failures are connectivity failures."""
    docker_engine._run.side_effect = [failed(1), failed(1, "error during connect: context deadline exceeded")]

    with pytest.raises(ConnectivityFailure):
        await docker_engine.list_networks()


@pytest.mark.asyncio
async def test_remove_image_failure(docker_engine):
    """Test that a failed removal with a healthy daemon is RemoveFailed."""
    docker_engine._run.side_effect = [failed(1, "Error: No such image"), ok()]

    with pytest.raises(RemoveFailed) as exc_info:
        await docker_engine.remove_image(ImageInfo(image_name="paulenv:gone"))

    assert "image paulenv:gone" in str(exc_info.value)
