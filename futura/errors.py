from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
import traceback


class UserError(Exception):
    def __str__(self):
        return "Unknown user error."


@dataclass
class HelpfulUserError(UserError):
    msg: str

    def __str__(self):
        return self.msg


@dataclass
class InputError(UserError):
    expected: Any
    got: Any

    def __str__(self):
        return f"Expected {self.expected}, got: {self.got}"


@dataclass
class ProgrammerError(Exception):
    """Calling code broke a contract; not something a user can fix."""
    message: str
    info: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        Exception.__init__(self, self.message)

    def __str__(self):
        return self.message


class StackedError(Exception):
    """Wraps one or more causes under a new message.

    Wrapping another `StackedError` flattens its causes and appends the
    wrapped error itself, so `errors` always reads innermost first.
    """
    def __init__(self, message: str, err: BaseException | list[BaseException] | None = None):
        super().__init__(message)
        self.message = message

        if isinstance(err, StackedError):
            self.errors: list[BaseException] = [*err.errors, err]
        elif isinstance(err, list):
            self.errors = list(err)
        elif err is not None:
            self.errors = [err]
        else:
            self.errors = []

        self.code = getattr(self.errors[0], "code", None) if self.errors else None

    def __str__(self):
        return self.message

    def full_stack(self) -> str:
        return "\n\n".join(
            "".join(traceback.format_exception(e)).rstrip()
            for e in [self, *self.errors]
        )


class UnprocessableError(Exception):
    """Client input could not be processed; carries what an HTTP layer needs
    to report it."""
    code = "UNPROCESSABLE_ERROR"
    title = "Unprocessable Entity"
    status_code = 400

    def __init__(self, message: str, pointer: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = message
        self.pointer = pointer

    def __str__(self):
        return self.message
