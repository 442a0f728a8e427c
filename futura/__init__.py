from .result import Result, Resolved, Rejected, fold
from .settlement import Settlement, settle
from .task import Task, handle_rejection
from .maybe import Maybe, Just, Nothing, maybe
from .errors import ProgrammerError, StackedError, UnprocessableError
from .version import __version__

__all__ = [
    "Result", "Resolved", "Rejected", "fold", "Settlement", "settle", "Task",
    "handle_rejection", "Maybe", "Just", "Nothing", "maybe", "ProgrammerError",
    "StackedError", "UnprocessableError", "__version__",
]
