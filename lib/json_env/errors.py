"""Error taxonomy for json-env.

Every failure is terminal: the CLI reports the message and exits with the
error's ``exit_code``. Messages always name the offending path or expression.

Two families:
- configuration/trust errors: exit 1
- spawn errors: 127 (program not found) or 126 (not executable), so a failed
  launch is never mistaken for a child that ran and returned nonzero
"""

from __future__ import annotations


class JsonEnvError(Exception):
    """Base class for all json-env failures."""

    code: str = "error"
    exit_code: int = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigNotFound(JsonEnvError):
    code = "config_not_found"

    def __init__(self, path: str, detail: str | None = None) -> None:
        message = f"Could not open config file '{path}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.path = path


class ConfigParseError(JsonEnvError):
    code = "config_parse_error"

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Could not parse config file '{path}': {detail}")
        self.path = path


class PathInvalid(JsonEnvError):
    code = "path_invalid"

    def __init__(self, expression: str, path: str, detail: str) -> None:
        super().__init__(f"Invalid path expression '{expression}' for '{path}': {detail}")
        self.expression = expression
        self.path = path


class PathNotFound(JsonEnvError):
    code = "path_not_found"

    def __init__(self, expression: str, path: str, detail: str | None = None) -> None:
        message = f"Path expression '{expression}' matched nothing in '{path}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.expression = expression
        self.path = path


class PathNotAnObject(JsonEnvError):
    code = "path_not_an_object"

    def __init__(self, expression: str, path: str, actual_type: str) -> None:
        super().__init__(
            f"Path expression '{expression}' in '{path}' selects a value of type {actual_type}, "
            "expected an object"
        )
        self.expression = expression
        self.path = path
        self.actual_type = actual_type


class ChildSpawnError(JsonEnvError):
    code = "child_spawn_error"

    def __init__(self, program: str, detail: str, exit_code: int = 127) -> None:
        super().__init__(f"Could not start executable '{program}': {detail}")
        self.program = program
        self.exit_code = exit_code


class TrustStoreIOError(JsonEnvError):
    code = "trust_store_io_error"

    def __init__(self, path: str, detail: str) -> None:
        super().__init__(f"Trust store '{path}' unusable: {detail}")
        self.path = path
