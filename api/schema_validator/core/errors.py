from typing import Any, Iterable, Optional


class SchemaValidatorError(Exception):
    """Base class for structural problems that stop a validation."""


class MissingSchemaError(SchemaValidatorError):
    def __init__(self, message: str = "You must provide a valid schema!"):
        super().__init__(message)


class MissingParameterError(SchemaValidatorError):
    def __init__(self, missing: Iterable[str]):
        self.missing = tuple(missing)
        super().__init__(
            "Missing required parameters in the path descriptor: "
            f"{', '.join(self.missing)} (expected endpoint, method and status)"
        )


class ResponseDefinitionNotFoundError(SchemaValidatorError):
    """Neither the requested status nor ``default`` is declared for the endpoint."""

    def __init__(self, attempted_paths: Iterable[str]):
        self.attempted_paths = tuple(attempted_paths)
        super().__init__(
            "No response definition found in the schema document. Tried: "
            + " and ".join(f"'{p}'" for p in self.attempted_paths)
        )


class SchemaDefinitionNotFoundError(SchemaValidatorError):
    """The response definition exists but does not carry a response schema."""

    def __init__(self, attempted_path: str):
        self.attempted_path = attempted_path
        super().__init__(
            f"No schema definition found in the schema document at '{attempted_path}'"
        )


class InvalidSchemaError(SchemaValidatorError):
    """The schema handed to the validation engine is not a valid JSON Schema."""


class InvalidApiResponseError(SchemaValidatorError):
    def __init__(
        self,
        message: str = "The element passed for validation is expected to be an API response!",
    ):
        super().__init__(message)


class ResponseSchemaMismatchError(AssertionError):
    """Raised by the host commands when the data does not conform to the schema.

    The core never raises it: a failed validation is a regular result, the
    command layer turns it into an assertion failure so test runners report it.
    """

    def __init__(self, result: Any, message: Optional[str] = None):
        self.result = result
        super().__init__(message or "The response body is not valid against the schema!")
