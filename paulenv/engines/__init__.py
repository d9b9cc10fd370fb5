"""Container engines managing paulenv project images, containers and resources."""

from paulenv.engines.base import (
    ContainerEngine,
    ContainerInfo,
    EngineInfo,
    ImageInfo,
    NetworkInfo,
    VolumeInfo,
)
from paulenv.engines.docker import DockerEngine
from paulenv.engines.errors import (
    BuildFailed,
    CommandError,
    CommandTimeout,
    ConnectivityFailure,
    CreateFailed,
    EngineError,
    EngineUnavailable,
    InspectFailed,
    JoinFailed,
    ListFailed,
    NotFound,
    OperationFailed,
    PermissionDenied,
    PruneFailed,
    RemoveFailed,
    RunFailed,
    UnknownEngine,
    UnknownVersionFormat,
    UnparseableOutput,
)
from paulenv.engines.factory import available_engines, create_engine, detect_engine
from paulenv.engines.podman import PodmanEngine

__all__ = [
    # Base class and records
    "ContainerEngine",
    "ContainerInfo",
    "EngineInfo",
    "ImageInfo",
    "NetworkInfo",
    "VolumeInfo",
    # Engine implementations
    "DockerEngine",
    "PodmanEngine",
    # Factory
    "available_engines",
    "create_engine",
    "detect_engine",
    # Errors
    "BuildFailed",
    "CommandError",
    "CommandTimeout",
    "ConnectivityFailure",
    "CreateFailed",
    "EngineError",
    "EngineUnavailable",
    "InspectFailed",
    "JoinFailed",
    "ListFailed",
    "NotFound",
    "OperationFailed",
    "PermissionDenied",
    "PruneFailed",
    "RemoveFailed",
    "RunFailed",
    "UnknownEngine",
    "UnknownVersionFormat",
    "UnparseableOutput",
]
