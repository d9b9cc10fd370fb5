"""Podman engine, driving `podman` and `podman compose`."""

from __future__ import annotations

import re

from paulenv.config import settings
from paulenv.engines.cli import CliEngine
from paulenv.engines.naming import BUILD_CACHE_LABEL


class PodmanEngine(CliEngine):
    """ContainerEngine for Podman.

    `podman compose` is built in since Podman 4.0 and delegates to an
    installed compose provider.
    """

    # "podman version 4.3.1"
    version_pattern = re.compile(r"podman version ([0-9]+\.[0-9]+\.[0-9]+)")
    permission_markers = (
        "permission denied",
        "access denied",
        "cannot connect to Podman",
    )

    def __init__(
        self,
        binary: str | None = None,
        not_found_exit_codes: list[int] | None = None,
        command_timeout: float | None = None,
        check_timeout: float | None = None,
    ):
        super().__init__(
            binary or settings.podman_binary,
            settings.podman_not_found_exit_codes if not_found_exit_codes is None else not_found_exit_codes,
            command_timeout=command_timeout,
            check_timeout=check_timeout,
        )

    @property
    def name(self) -> str:
        return "podman"

    def _prune_args(self) -> list[str]:
        return ["image", "prune", "-f", "--filter", f"label={BUILD_CACHE_LABEL}"]
