"""Container engines driven through a docker-compatible command line.

CliEngine implements the whole ContainerEngine contract on top of a CLI
that understands the docker command surface (`compose`, `ps --format`,
`image inspect`...). Backends subclass it to provide their executable,
version banner, permission markers and the few commands that differ.
"""

from __future__ import annotations

import logging
import re
from typing import NoReturn

from paulenv.config import settings
from paulenv.engines import parsers
from paulenv.engines.base import (
    ContainerEngine,
    ContainerInfo,
    EngineInfo,
    ImageInfo,
    NetworkInfo,
    VolumeInfo,
)
from paulenv.engines.errors import (
    BuildFailed,
    CommandError,
    ConnectivityFailure,
    CreateFailed,
    EngineError,
    InspectFailed,
    JoinFailed,
    ListFailed,
    NotFound,
    OperationFailed,
    PermissionDenied,
    PruneFailed,
    RemoveFailed,
    RunFailed,
)
from paulenv.engines.invoker import CommandResult, Stream, run_command
from paulenv.engines.naming import (
    COMPOSE_PROJECT_PREFIX,
    ENTRYPOINT_PATH,
    IMAGE_PREFIX,
    SERVICE_NAME,
    compose_project_name,
    image_reference,
    project_from_image,
)
from paulenv.engines.permissions import classify_check_failure
from paulenv.project import ProjectEntry


logger = logging.getLogger(__name__)


class CliEngine(ContainerEngine):
    """Engine invoking a docker-compatible CLI and parsing its output."""

    # Matches the version banner; group 1 is the version number
    version_pattern: re.Pattern[str]
    # stderr substrings of the permission check meaning "access refused"
    permission_markers: tuple[str, ...] = ()

    def __init__(
        self,
        binary: str,
        not_found_exit_codes: list[int],
        command_timeout: float | None = None,
        check_timeout: float | None = None,
    ):
        self._binary = binary
        self._not_found_exit_codes = frozenset(not_found_exit_codes)
        if command_timeout is None:
            command_timeout = settings.command_timeout
        if check_timeout is None:
            check_timeout = settings.check_timeout
        # 0 means no deadline
        self._command_timeout = command_timeout or None
        self._check_timeout = check_timeout or None

    @property
    def binary(self) -> str:
        return self._binary

    @property
    def not_found_exit_codes(self) -> frozenset[int]:
        return self._not_found_exit_codes

    # --- Command lines ---

    def _compose_args(self, project: ProjectEntry) -> list[str]:
        return [
            "compose",
            "-f", str(project.compose_file_path),
            "--env-file", str(project.env_file_path),
        ]

    def _availability_args(self) -> list[str]:
        return ["compose", "version"]

    def _check_args(self) -> list[str]:
        return ["ps"]

    def _prune_args(self) -> list[str]:
        raise NotImplementedError

    # --- Execution helpers ---

    async def _run(
        self,
        args: list[str],
        *,
        env: dict[str, str] | None = None,
        stdin: Stream = Stream.DISCARD,
        stdout: Stream = Stream.CAPTURE,
        stderr: Stream = Stream.CAPTURE,
        timeout: float | None = None,
    ) -> CommandResult:
        """Run the engine's CLI with the given arguments."""
        return await run_command(
            [self._binary, *args],
            env=env,
            stdin=stdin,
            stdout=stdout,
            stderr=stderr,
            timeout=timeout,
        )

    async def _check_permissions(self) -> PermissionDenied | ConnectivityFailure | None:
        """Check the engine after a failure.

        Returns:
            PermissionDenied or ConnectivityFailure if the check fails,
            None if the engine is reachable
        """
        try:
            await self._run(
                self._check_args(),
                stdout=Stream.DISCARD,
                stderr=Stream.CAPTURE,
                timeout=self._check_timeout,
            )
        except CommandError as e:
            return classify_check_failure(self.name, e, self.permission_markers)
        return None

    def _log_fields(self, error: CommandError, operation: str | None) -> dict:
        """Structured logging fields describing a failed command."""
        return {
            "engine": self.name,
            "operation": operation,
            "argv": error.argv,
            "returncode": error.returncode,
        }

    def _raise_classified(
        self,
        classified: PermissionDenied | ConnectivityFailure,
        error: CommandError,
        operation: str | None,
    ) -> NoReturn:
        """Raise a classified error, chained to the check that produced it."""
        classified.operation_error = error
        logger.warning(
            f"{self.display_name} unusable after '{' '.join(error.argv)}' failed: {classified}",
            extra=self._log_fields(error, operation),
        )
        raise classified from classified.error

    async def _raise_failure(self, error: CommandError, failure: EngineError) -> NoReturn:
        """Raise the classified error for a failed command, else `failure`."""
        classified = await self._check_permissions()
        if classified is not None:
            self._raise_classified(classified, error, operation=getattr(failure, "operation", None))
        logger.debug(
            f"{self.display_name} command failed: {error}",
            extra=self._log_fields(error, getattr(failure, "operation", None)),
        )
        raise failure from error

    async def _inspect_image(self, image_name: str, fmt: str | None = None) -> CommandResult:
        """Inspect an image.

        Raises:
            NotFound: If the engine exits with one of its not-found codes
            InspectFailed: For other failures not caused by permissions
        """
        args = ["image", "inspect", image_name]
        if fmt is not None:
            args += ["--format", fmt]
        try:
            return await self._run(
                args,
                stdout=Stream.CAPTURE if fmt is not None else Stream.DISCARD,
                timeout=self._command_timeout,
            )
        except CommandError as e:
            classified = await self._check_permissions()
            if classified is not None:
                self._raise_classified(classified, e, operation="inspect")
            if e.returncode in self._not_found_exit_codes:
                raise NotFound(self.name, image_name) from e
            raise InspectFailed(self.name, image_name, str(e)) from e

    async def _list(self, args: list[str], what: str) -> str:
        try:
            result = await self._run(args, timeout=self._command_timeout)
        except CommandError as e:
            await self._raise_failure(e, ListFailed(self.name, what, str(e)))
        return result.stdout

    async def _manage(
        self,
        args: list[str],
        failure: type[OperationFailed],
        target: str,
        stderr: Stream = Stream.CAPTURE,
    ) -> None:
        try:
            await self._run(args, stdout=Stream.DISCARD, stderr=stderr, timeout=self._command_timeout)
        except CommandError as e:
            await self._raise_failure(e, failure(self.name, target, str(e)))

    async def ensure_available(self) -> None:
        """Check that the engine and its compose support can be invoked.

        Raises:
            CommandError: If the engine's compose command cannot be run
        """
        await self._run(
            self._availability_args(),
            stdout=Stream.DISCARD,
            timeout=self._check_timeout,
        )

    # --- ContainerEngine ---

    async def build_image(self, project: ProjectEntry, relative_dotfiles_dir: str) -> None:
        logger.info(f"Building image {image_reference(project.project_name)} with {self.display_name}")
        try:
            await self._run(
                self._compose_args(project) + ["build"],
                env={
                    "COMPOSE_PROJECT_NAME": compose_project_name(project.project_name),
                    "DOTFILES_DIR": relative_dotfiles_dir,
                },
                stdout=Stream.INHERIT,
                stderr=Stream.INHERIT,
            )
        except CommandError as e:
            await self._raise_failure(e, BuildFailed(self.name, project.project_name, str(e)))

    async def run_container(self, project: ProjectEntry, args: list[str]) -> None:
        try:
            await self._run(
                self._compose_args(project) + ["run", "--rm", SERVICE_NAME, *args],
                env={"COMPOSE_PROJECT_NAME": compose_project_name(project.project_name)},
                stdin=Stream.INHERIT,
                stdout=Stream.INHERIT,
                stderr=Stream.INHERIT,
            )
        except CommandError as e:
            await self._raise_failure(e, RunFailed(self.name, project.project_name, str(e)))

    async def join_container(self, container: ContainerInfo, args: list[str]) -> None:
        try:
            await self._run(
                ["exec", "-it", container.container_id, ENTRYPOINT_PATH, *args],
                stdin=Stream.INHERIT,
                stdout=Stream.INHERIT,
                stderr=Stream.INHERIT,
            )
        except CommandError as e:
            target = container.container_name or container.container_id
            await self._raise_failure(e, JoinFailed(self.name, target, str(e)))

    async def has_been_built(self, project_name: str) -> bool:
        try:
            await self._inspect_image(image_reference(project_name))
        except NotFound:
            return False
        return True

    async def info(self) -> EngineInfo:
        try:
            result = await self._run(["--version"], timeout=self._check_timeout)
        except CommandError as e:
            await self._raise_failure(e, InspectFailed(self.name, "version", str(e)))
        version = parsers.parse_version(self.name, result.stdout, self.version_pattern)
        return EngineInfo(name=self.name, version=version)

    async def create_volume(self, name: str) -> None:
        logger.debug(f"Creating volume {name}")
        await self._manage(
            ["volume", "create", name],
            CreateFailed, f"volume {name}",
            stderr=Stream.INHERIT,
        )

    async def get_image_info(self, project_name: str) -> ImageInfo:
        image_name = image_reference(project_name)
        info = ImageInfo(image_name=image_name, project_name=project_from_image(image_name))
        try:
            result = await self._inspect_image(image_name, fmt="{{.Created}}")
        except NotFound:
            return info
        info.built_at = parsers.parse_rfc3339(result.stdout)
        return info

    async def list_containers(self) -> list[ContainerInfo]:
        output = await self._list(
            [
                "ps", "-a",
                "--filter", f"name={COMPOSE_PROJECT_PREFIX}",
                "--format", "{{.ID}}\t{{.Image}}\t{{.Names}}",
            ],
            "containers",
        )
        return parsers.parse_containers(output)

    async def remove_container(self, container: ContainerInfo) -> None:
        logger.info(f"Removing container: {container.container_name or container.container_id}")
        await self._manage(
            ["rm", "-f", container.container_id],
            RemoveFailed, f"container {container.container_id}",
        )

    async def list_volumes(self) -> list[VolumeInfo]:
        output = await self._list(
            [
                "volume", "ls",
                "--filter", f"name={COMPOSE_PROJECT_PREFIX}",
                "--format", "{{.Name}}",
            ],
            "volumes",
        )
        return parsers.parse_volumes(output)

    async def remove_volume(self, volume: VolumeInfo) -> None:
        logger.info(f"Removing volume: {volume.volume_name}")
        await self._manage(
            ["volume", "rm", volume.volume_name],
            RemoveFailed, f"volume {volume.volume_name}",
        )

    async def list_networks(self) -> list[NetworkInfo]:
        output = await self._list(
            [
                "network", "ls",
                "--filter", f"name={COMPOSE_PROJECT_PREFIX}",
                "--format", "{{.ID}}\t{{.Name}}",
            ],
            "networks",
        )
        return parsers.parse_networks(output)

    async def remove_network(self, network: NetworkInfo) -> None:
        logger.info(f"Removing network: {network.network_name}")
        await self._manage(
            ["network", "rm", network.network_id],
            RemoveFailed, f"network {network.network_name}",
        )

    async def prune_build_cache(self) -> None:
        logger.info(f"Pruning {self.display_name} build cache")
        await self._manage(self._prune_args(), PruneFailed, "build cache")

    async def list_images(self) -> list[ImageInfo]:
        output = await self._list(
            [
                "images",
                "--filter", f"reference={IMAGE_PREFIX}*",
                "--format", "{{.Repository}}:{{.Tag}}\t{{.CreatedAt}}",
            ],
            "images",
        )
        return parsers.parse_images(output)

    async def remove_image(self, image: ImageInfo) -> None:
        logger.info(f"Removing image: {image.image_name}")
        await self._manage(
            ["rmi", "-f", image.image_name],
            RemoveFailed, f"image {image.image_name}",
        )
