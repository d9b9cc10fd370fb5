"""Tests for engine registration and detection."""

from unittest.mock import AsyncMock, patch

import pytest

from paulenv.engines.docker import DockerEngine
from paulenv.engines.errors import CommandError, EngineUnavailable, UnknownEngine
from paulenv.engines.factory import available_engines, create_engine, detect_engine
from paulenv.engines.podman import PodmanEngine


def unavailable(binary: str) -> CommandError:
    return CommandError([binary, "compose", "version"], None, reason="No such file or directory")


def test_available_engines_order():
    """Test that podman is tried before docker."""
    assert available_engines() == ["podman", "docker"]


def test_create_engine():
    """Test construction by name, case-insensitively."""
    assert isinstance(create_engine("podman"), PodmanEngine)
    assert isinstance(create_engine("Docker"), DockerEngine)


def test_create_unknown_engine():
    """Test that unknown names are rejected."""
    with pytest.raises(UnknownEngine) as exc_info:
        create_engine("containerd")

    assert exc_info.value.known == ["podman", "docker"]


@pytest.mark.asyncio
async def test_detect_first_available():
    """Test that the first available engine is returned."""
    with patch.object(PodmanEngine, "ensure_available", new_callable=AsyncMock) as podman_check, \
            patch.object(DockerEngine, "ensure_available", new_callable=AsyncMock) as docker_check:
        engine = await detect_engine(preferred="")

    assert isinstance(engine, PodmanEngine)
    podman_check.assert_awaited_once()
    docker_check.assert_not_awaited()


@pytest.mark.asyncio
async def test_detect_falls_back():
    """Test that detection moves on when an engine is missing."""
    with patch.object(PodmanEngine, "ensure_available", new_callable=AsyncMock) as podman_check, \
            patch.object(DockerEngine, "ensure_available", new_callable=AsyncMock):
        podman_check.side_effect = unavailable("podman")
        engine = await detect_engine(preferred="")

    assert isinstance(engine, DockerEngine)


@pytest.mark.asyncio
async def test_detect_preferred_first():
    """Test that the preferred engine is tried first."""
    with patch.object(PodmanEngine, "ensure_available", new_callable=AsyncMock) as podman_check, \
            patch.object(DockerEngine, "ensure_available", new_callable=AsyncMock):
        engine = await detect_engine(preferred="docker")

    assert isinstance(engine, DockerEngine)
    podman_check.assert_not_awaited()


@pytest.mark.asyncio
async def test_detect_preferred_from_settings():
    """Test that settings.engine is used when no preference is given."""
    with patch("paulenv.engines.factory.settings") as mock_settings, \
            patch.object(PodmanEngine, "ensure_available", new_callable=AsyncMock), \
            patch.object(DockerEngine, "ensure_available", new_callable=AsyncMock):
        mock_settings.engine = "docker"
        engine = await detect_engine()

    assert isinstance(engine, DockerEngine)


@pytest.mark.asyncio
async def test_detect_unknown_preferred():
    """Test that an unknown preference is an error."""
    with pytest.raises(UnknownEngine):
        await detect_engine(preferred="lxc")


@pytest.mark.asyncio
async def test_detect_none_available():
    """Test that every failure is reported when nothing is usable."""
    with patch.object(PodmanEngine, "ensure_available", new_callable=AsyncMock) as podman_check, \
            patch.object(DockerEngine, "ensure_available", new_callable=AsyncMock) as docker_check:
        podman_check.side_effect = unavailable("podman")
        docker_check.side_effect = unavailable("docker")

        with pytest.raises(EngineUnavailable) as exc_info:
            await detect_engine(preferred="")

    assert set(exc_info.value.failures) == {"podman", "docker"}
    assert "No such file or directory" in str(exc_info.value)
