from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import pytest

from futura.errors import HelpfulUserError, InputError
from futura.utility import construct, read_from_file


@dataclass
class Inner:
    name: str
    tags: list[str] = field(default_factory=list)


@dataclass
class Outer:
    path: Path
    inner: dict[str, Inner] = field(default_factory=dict)
    port: Optional[int] = None
    extra: Any = None


def test_construct_path():
    assert isinstance(construct(Path, "hello.txt"), Path)
    assert construct(Optional[Path], None) is None
    assert construct(Path | None, "x") == Path("x")


def test_construct_dataclass():
    obj = construct(Outer, {
        "path": "a/b",
        "inner": {"x": {"name": "x", "tags": ["t"]}},
        "port": 8080,
        "extra": [1, {"2": 3}],
    })
    assert obj == Outer(Path("a/b"), {"x": Inner("x", ["t"])}, 8080, [1, {"2": 3}])


@pytest.mark.parametrize("annot, data", [
    (int, "1"),
    (list[str], "abc"),
    (Inner, {"name": "x", "unknown": 1}),
    (Inner, {"tags": []}),
    (Outer, {"path": 3}),
])
def test_construct_fails(annot, data):
    with pytest.raises(InputError):
        construct(annot, data)


def test_read_from_file(tmp_path: Path):
    path = tmp_path / "pyproject.toml"
    path.write_text('[tool.inner]\nname = "x"\n')
    assert read_from_file(Inner, path, "tool.inner") == Inner("x")

    with pytest.raises(HelpfulUserError):
        read_from_file(Inner, path, "tool.missing")
    with pytest.raises(HelpfulUserError):
        read_from_file(Inner, tmp_path / "missing.toml")

    other = tmp_path / "inner.yaml"
    other.write_text("name: x\n")
    with pytest.raises(HelpfulUserError):
        read_from_file(Inner, other)
