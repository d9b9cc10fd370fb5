"""Shared pytest fixtures for engine tests."""
from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from paulenv.engines.docker import DockerEngine
from paulenv.engines.podman import PodmanEngine
from paulenv.project import ProjectEntry


@pytest.fixture
def project() -> ProjectEntry:
    """A project entry with fixed file paths."""
    return ProjectEntry(
        project_name="myproj",
        compose_file_path=Path("/home/user/.paulenv/myproj/compose.yaml"),
        env_file_path=Path("/home/user/.paulenv/myproj/.env"),
    )


@pytest.fixture
def podman() -> PodmanEngine:
    """Podman engine whose CLI runner is mocked."""
    engine = PodmanEngine(
        binary="podman",
        not_found_exit_codes=[125, 1],
        command_timeout=0,
        check_timeout=0,
    )
    engine._run = AsyncMock()
    return engine


@pytest.fixture
def docker_engine() -> DockerEngine:
    """Docker engine whose CLI runner is mocked."""
    engine = DockerEngine(
        binary="docker",
        not_found_exit_codes=[1],
        command_timeout=0,
        check_timeout=0,
    )
    engine._run = AsyncMock()
    return engine
