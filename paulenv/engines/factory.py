"""Selection of the container engine available on this host.

Engines are registered by name. Detection tries them in order (the
preferred engine first) and returns the first one whose compose support
can be invoked.
"""

from __future__ import annotations

import logging

from paulenv.config import settings
from paulenv.engines.cli import CliEngine
from paulenv.engines.docker import DockerEngine
from paulenv.engines.errors import CommandError, EngineUnavailable, UnknownEngine
from paulenv.engines.podman import PodmanEngine

logger = logging.getLogger(__name__)

# Detection order when no engine is preferred
ENGINES: dict[str, type[CliEngine]] = {
    "podman": PodmanEngine,
    "docker": DockerEngine,
}


def available_engines() -> list[str]:
    """List registered engine names, in detection order."""
    return list(ENGINES.keys())


def create_engine(name: str) -> CliEngine:
    """Construct an engine by name, without probing the host.

    Raises:
        UnknownEngine: If no engine is registered under that name
    """
    engine_class = ENGINES.get(name.lower())
    if engine_class is None:
        raise UnknownEngine(name, available_engines())
    return engine_class()


async def detect_engine(preferred: str | None = None) -> CliEngine:
    """Find a usable engine.

    Args:
        preferred: Engine to try first; defaults to settings.engine

    Returns:
        The first engine whose availability check succeeds

    Raises:
        UnknownEngine: If the preferred engine is not registered
        EngineUnavailable: If no engine can be used
    """
    if preferred is None:
        preferred = settings.engine or None

    names = available_engines()
    if preferred:
        create_engine(preferred)  # validates the name
        preferred = preferred.lower()
        names = [preferred] + [name for name in names if name != preferred]

    failures: dict[str, str] = {}
    for name in names:
        engine = create_engine(name)
        try:
            await engine.ensure_available()
        except CommandError as e:
            logger.debug(f"Engine {name} unavailable: {e}")
            failures[name] = str(e)
            continue
        logger.info(f"Using container engine: {name}")
        return engine

    raise EngineUnavailable(failures)
