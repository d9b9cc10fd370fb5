"""paulenv configuration."""

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # Preferred container engine ("podman", "docker"); auto-detect if empty
    engine: str = ""

    # Executables invoked for each backend
    podman_binary: str = "podman"
    docker_binary: str = "docker"

    # Command timeouts (seconds)
    command_timeout: float = 0.0  # 0 disables; never applied to build/run/join
    check_timeout: float = 10.0  # availability and permission checks

    # Exit codes meaning "no such object" for inspect-style queries.
    # These have changed across engine releases, hence configurable.
    podman_not_found_exit_codes: list[int] = [125, 1]
    docker_not_found_exit_codes: list[int] = [1]

    # Logging configuration
    log_format: str = "text"  # "json" or "text"
    log_level: str = "INFO"

    class Config:
        env_prefix = "PAULENV_"


settings = Settings()
