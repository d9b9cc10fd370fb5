"""Project entries consumed by container engines."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class ProjectEntry:
    """A configured dev-environment project.

    Attributes:
        project_name: Name of the project, as chosen by the user
        compose_file_path: Path to the project's compose file
        env_file_path: Path to the env file passed to compose
    """
    project_name: str
    compose_file_path: Path
    env_file_path: Path
