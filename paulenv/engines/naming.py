"""Naming conventions shared by every engine.

Images are tagged "paulenv:<project>", compose projects (and therefore
containers, volumes and networks) are named "paulenv-<project>", and the
default compose network of a project is "paulenv-<project>_default".
"""

from __future__ import annotations

COMPOSE_PROJECT_PREFIX = "paulenv-"
IMAGE_PREFIX = "paulenv:"
DEFAULT_NETWORK_SUFFIX = "_default"
BUILD_CACHE_LABEL = "paulenv=true"
ENTRYPOINT_PATH = "/usr/local/bin/entrypoint.sh"
SERVICE_NAME = "paulenv"


def image_reference(project_name: str) -> str:
    """Image reference built for a project."""
    return f"{IMAGE_PREFIX}{project_name}"


def compose_project_name(project_name: str) -> str:
    """Compose project name used when building and running a project."""
    return f"{COMPOSE_PROJECT_PREFIX}{project_name}"


def project_from_image(image_name: str | None) -> str | None:
    """Derive the project of an image reference, if it follows the convention."""
    if image_name and image_name.startswith(IMAGE_PREFIX) and len(image_name) > len(IMAGE_PREFIX):
        return image_name[len(IMAGE_PREFIX):]
    return None


def project_from_network(network_name: str | None) -> str | None:
    """Derive the project of a network name, if it follows the convention.

    Both "paulenv-<project>_default" and "paulenv-<project>" map to <project>.
    """
    if not network_name or not network_name.startswith(COMPOSE_PROJECT_PREFIX):
        return None
    project = network_name[len(COMPOSE_PROJECT_PREFIX):]
    if project.endswith(DEFAULT_NETWORK_SUFFIX):
        project = project[:-len(DEFAULT_NETWORK_SUFFIX)]
    return project or None
