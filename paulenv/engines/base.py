"""Base container engine interface for paulenv projects."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from paulenv.project import ProjectEntry


@dataclass
class EngineInfo:
    """Identity and version of a container engine."""
    name: str
    version: str


@dataclass
class ImageInfo:
    """A built project image."""
    image_name: str
    project_name: str | None = None
    built_at: datetime | None = None


@dataclass
class ContainerInfo:
    """A running or stopped container."""
    container_id: str
    container_name: str | None = None
    image_name: str | None = None
    project_name: str | None = None


@dataclass
class VolumeInfo:
    """A named persistent volume."""
    volume_id: str
    volume_name: str


@dataclass
class NetworkInfo:
    """A project network."""
    network_id: str
    network_name: str
    project_name: str | None = None


class ContainerEngine(ABC):
    """Abstract base class for container engines.

    Every method performs a single call to the engine (plus, on failure, one
    diagnostic check) and keeps no state between calls: the engine is the
    only source of truth. Failures are reported as EngineError subclasses,
    with PermissionDenied/ConnectivityFailure taking precedence over the
    operation-specific errors.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Engine name (e.g., 'podman', 'docker')."""
        ...

    @property
    def display_name(self) -> str:
        """Human-readable display name for the engine."""
        return self.name.capitalize()

    @abstractmethod
    async def build_image(self, project: ProjectEntry, relative_dotfiles_dir: str) -> None:
        """Build the image of a project through compose.

        Build output is streamed to the caller's stdout/stderr.

        Raises:
            BuildFailed: If the build fails for a non-permission reason
        """
        ...

    @abstractmethod
    async def run_container(self, project: ProjectEntry, args: list[str]) -> None:
        """Run a throwaway container of the project interactively.

        Args:
            project: Project to run
            args: Extra arguments appended verbatim to the run command

        Raises:
            RunFailed: If the container cannot be run or exits non-zero
        """
        ...

    @abstractmethod
    async def join_container(self, container: ContainerInfo, args: list[str]) -> None:
        """Open an interactive session in an already running container.

        Raises:
            JoinFailed: If the session cannot be opened or exits non-zero
        """
        ...

    @abstractmethod
    async def has_been_built(self, project_name: str) -> bool:
        """Check whether the image of a project exists.

        Returns:
            False only when the engine reports the image as not found
        """
        ...

    @abstractmethod
    async def info(self) -> EngineInfo:
        """Get name and version of the engine.

        Raises:
            UnknownVersionFormat: If the engine answered with an unexpected banner
        """
        ...

    @abstractmethod
    async def create_volume(self, name: str) -> None:
        """Create a named volume."""
        ...

    @abstractmethod
    async def get_image_info(self, project_name: str) -> ImageInfo:
        """Get the image of a project.

        Returns:
            ImageInfo whose built_at is None when the image does not exist
            or its creation time cannot be parsed
        """
        ...

    @abstractmethod
    async def list_containers(self) -> list[ContainerInfo]:
        """List paulenv containers, running or not."""
        ...

    @abstractmethod
    async def remove_container(self, container: ContainerInfo) -> None:
        """Forcefully remove a container."""
        ...

    @abstractmethod
    async def list_volumes(self) -> list[VolumeInfo]:
        """List paulenv volumes."""
        ...

    @abstractmethod
    async def remove_volume(self, volume: VolumeInfo) -> None:
        """Remove a volume."""
        ...

    @abstractmethod
    async def list_networks(self) -> list[NetworkInfo]:
        """List paulenv networks."""
        ...

    @abstractmethod
    async def remove_network(self, network: NetworkInfo) -> None:
        """Remove a network."""
        ...

    @abstractmethod
    async def prune_build_cache(self) -> None:
        """Remove build artifacts labelled as belonging to paulenv."""
        ...

    @abstractmethod
    async def list_images(self) -> list[ImageInfo]:
        """List paulenv images."""
        ...

    @abstractmethod
    async def remove_image(self, image: ImageInfo) -> None:
        """Forcefully remove an image."""
        ...
