from __future__ import annotations
from typing import Optional, Type, TypeGuard, TypeVar, Any, Union, cast
from pathlib import Path
from dataclasses import is_dataclass
import typing
import types
import tomllib
import json

from .errors import HelpfulUserError, InputError


T = TypeVar("T")


def isgeneric(annot):
    return typing.get_origin(annot) and hasattr(annot, "__args__")


def is_object_type(dtype: Type[Any]) -> TypeGuard[Type[dict[str, Any]]]:
    return (
        isgeneric(dtype)
        and typing.get_origin(dtype) is dict
        and typing.get_args(dtype)[0] is str
    )


def is_optional_type(dtype: Type[Any]) -> bool:
    return (
        isgeneric(dtype)
        and typing.get_origin(dtype) in (Union, types.UnionType)
        and types.NoneType in typing.get_args(dtype)
    )


def construct(annot: Any, data: Any) -> Any:
    try:
        return _construct(annot, data)
    except (AssertionError, ValueError, TypeError) as e:
        raise InputError(annot, data) from e


def _construct(annot: Type[T], data: Any) -> T:
    """Construct an object of a given type from TOML or JSON data.

    The `annot` type should be one of: str, int, bool, Path, list[T],
    dict[str, T], Optional[T], or a dataclass, and the data should match
    the definitions in the dataclass hierarchy.
    """
    if annot is Any:
        return cast(T, data)
    if annot in (str, int, bool):
        assert isinstance(data, annot)
        return cast(T, data)
    if annot is Path:
        assert isinstance(data, str)
        return cast(T, Path(data))
    if is_object_type(annot):
        assert isinstance(data, dict)
        return cast(
            T, {k: construct(typing.get_args(annot)[1], v) for k, v in data.items()}
        )
    if isgeneric(annot) and typing.get_origin(annot) is list:
        assert isinstance(data, list)
        return cast(T, [construct(typing.get_args(annot)[0], item) for item in data])
    if is_optional_type(annot):
        if data is None:
            return cast(T, None)
        inner = [t for t in typing.get_args(annot) if t is not types.NoneType]
        return cast(T, construct(inner[0], data))
    if is_dataclass(annot):
        assert isinstance(data, dict)
        arg_annot = typing.get_type_hints(annot)
        unknown = set(data) - set(arg_annot)
        if unknown:
            raise ValueError(f"Unknown keys for {annot.__name__}: {sorted(unknown)}")
        args = {k: construct(arg_annot[k], v) for k, v in data.items()}
        return cast(T, annot(**args))
    raise ValueError(f"Couldn't construct {annot} from {repr(data)}")


def read_data(path: Path) -> Any:
    with open(path, "rb") as f:
        if path.suffix == ".toml":
            return tomllib.load(f)
        elif path.suffix == ".json":
            return json.load(f)
        else:
            raise HelpfulUserError(f"Unrecognized file format: {path}")


def read_from_file(data_type: Type[T], path: Path, section: Optional[str] = None) -> T:
    """Read a `data_type` object from given `path` in given `section`. The
    path should refer to a TOML or JSON file. The `section` string may
    contain periods to indicate deeper nesting.

    Example:

    ```python
    read_from_file(Settings, Path("./pyproject.toml"), "tool.futura")
    ```
    """
    if not path.exists():
        raise HelpfulUserError(f"File not found: {path}")
    data = read_data(path)

    try:
        if section is not None:
            for s in section.split("."):
                data = data[s]
    except KeyError as e:
        raise HelpfulUserError(
            f"Data file `{path}` should contain section `{section}`."
        ) from e

    return construct(data_type, data)
