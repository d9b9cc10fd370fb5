"""Docker engine, driving `docker` and the `docker compose` plugin."""

from __future__ import annotations

import re

from paulenv.config import settings
from paulenv.engines.cli import CliEngine
from paulenv.engines.naming import BUILD_CACHE_LABEL


class DockerEngine(CliEngine):
    """ContainerEngine for Docker (compose v2 plugin required)."""

    # "Docker version 24.0.7, build afdd53b"
    version_pattern = re.compile(r"Docker version ([0-9]+\.[0-9]+\.[0-9]+)")
    permission_markers = (
        "permission denied",
        # named pipe on Windows: "open //./pipe/docker_engine: Access is denied."
        "Access is denied",
        "Cannot connect to the Docker daemon",
    )

    def __init__(
        self,
        binary: str | None = None,
        not_found_exit_codes: list[int] | None = None,
        command_timeout: float | None = None,
        check_timeout: float | None = None,
    ):
        super().__init__(
            binary or settings.docker_binary,
            settings.docker_not_found_exit_codes if not_found_exit_codes is None else not_found_exit_codes,
            command_timeout=command_timeout,
            check_timeout=check_timeout,
        )

    @property
    def name(self) -> str:
        return "docker"

    def _prune_args(self) -> list[str]:
        # BuildKit keeps its cache outside of images
        return ["builder", "prune", "-f", "--filter", f"label={BUILD_CACHE_LABEL}"]
