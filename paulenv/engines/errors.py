"""Error types raised by container engines.

Every failure surfaced to callers derives from EngineError. On the failure
path of an engine operation the permission/connectivity classification
(PermissionDenied, ConnectivityFailure) wins over the operation-specific
wrapper (BuildFailed, RemoveFailed, ...). Operation errors chain the
failed CommandError as __cause__; classified errors chain the failed check
and keep the operation's CommandError as `operation_error`.
"""

from __future__ import annotations


class EngineError(Exception):
    """Base class for all container engine errors."""


class CommandError(EngineError):
    """An external command exited non-zero or could not be started."""

    def __init__(
        self,
        args: list[str],
        returncode: int | None,
        stdout: str = "",
        stderr: str = "",
        reason: str | None = None,
    ):
        self.argv = list(args)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        if reason is None:
            reason = f"exit status {returncode}"
        self.reason = reason
        super().__init__(f"{' '.join(self.argv)}: {reason}")


class CommandTimeout(CommandError):
    """An external command did not finish before its deadline."""

    def __init__(self, args: list[str], timeout: float):
        self.timeout = timeout
        super().__init__(args, None, reason=f"timed out after {timeout}s")


class NotFound(EngineError):
    """An inspect-style query reported that the object does not exist."""

    def __init__(self, engine: str, name: str):
        self.engine = engine
        self.name = name
        super().__init__(f"{engine}: no such object: {name}")


class PermissionDenied(EngineError):
    """The engine refused access (socket permissions, rootless setup...).

    `error` is the failed permission check; `operation_error` the failure
    of the operation that triggered it, when there is one.
    """

    def __init__(self, engine: str, stderr: str = "", error: CommandError | None = None):
        self.engine = engine
        self.stderr = stderr
        self.error = error
        self.operation_error: CommandError | None = None
        super().__init__(
            f"permission denied. Please check {engine.capitalize()} socket permissions"
        )


class ConnectivityFailure(EngineError):
    """The engine could not be reached for a reason other than permissions."""

    def __init__(self, engine: str, stderr: str = "", error: CommandError | None = None):
        self.engine = engine
        self.stderr = stderr
        self.error = error
        self.operation_error: CommandError | None = None
        message = f"failed to connect to {engine.capitalize()}"
        if error is not None:
            message += f": {error}"
        if stderr.strip():
            message += f"\n{stderr.strip()}"
        super().__init__(message)


class OperationFailed(EngineError):
    """An engine operation failed for a reason unrelated to permissions."""

    operation = "operation"

    def __init__(self, engine: str, target: str | None = None, detail: str = ""):
        self.engine = engine
        self.target = target
        self.detail = detail
        message = f"{self.operation} failed"
        if target:
            message += f" for {target}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class BuildFailed(OperationFailed):
    operation = "build"


class RunFailed(OperationFailed):
    operation = "run"


class JoinFailed(OperationFailed):
    operation = "join"


class CreateFailed(OperationFailed):
    operation = "create"


class RemoveFailed(OperationFailed):
    operation = "remove"


class PruneFailed(OperationFailed):
    operation = "prune"


class ListFailed(OperationFailed):
    operation = "list"


class InspectFailed(OperationFailed):
    operation = "inspect"


class UnparseableOutput(EngineError):
    """Engine output did not match any accepted format."""

    def __init__(self, engine: str, output: str, what: str = "output"):
        self.engine = engine
        self.output = output
        super().__init__(f"failed to parse {engine} {what}: {output!r}")


class UnknownVersionFormat(UnparseableOutput):
    """The version banner of the engine could not be parsed."""

    def __init__(self, engine: str, output: str):
        super().__init__(engine, output, what="version, unknown version format")


class UnknownEngine(EngineError):
    """No engine is registered under the requested name."""

    def __init__(self, name: str, known: list[str]):
        self.name = name
        self.known = known
        super().__init__(f"unknown container engine {name!r} (known: {', '.join(known)})")


class EngineUnavailable(EngineError):
    """None of the tried engines is usable on this host."""

    def __init__(self, failures: dict[str, str]):
        self.failures = failures
        details = "; ".join(f"{name}: {reason}" for name, reason in failures.items())
        super().__init__(f"no usable container engine found ({details})")
