from contextlib import chdir
from pathlib import Path
from unittest.mock import Mock

import pytest

from futura.configuration import (
    ApplicationConfig, ServerConfig, Settings, read_config_file, read_file_configuration
)
from futura.errors import InputError, ProgrammerError, StackedError
from futura.result import Rejected, Resolved


def write(path: Path, text: str):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    root = tmp_path / "config"
    write(root / "alpha" / "a-server.toml", 'port = 1\n')
    write(root / "alpha" / "b-server.toml", 'port = 2\n')
    write(root / "alpha" / "README.md", "not config\n")
    write(root / "alpha" / "applications" / "shop.toml", 'name = "shop"\n')
    write(root / "alpha" / "applications" / "blog.toml", 'title = "Blog"\n')
    (root / "beta" / "applications").mkdir(parents=True)
    write(root / "stray.toml", "ignored = true\n")
    return root


def run(task):
    out = []
    task.fork(lambda e: out.append(Rejected(e)), lambda a: out.append(Resolved(a)))
    assert len(out) == 1
    return out[0]


def test_read_file_configuration(config_dir: Path):
    result = run(read_file_configuration(config_dir))
    assert result

    alpha, beta = result.value
    assert alpha == ServerConfig(
        "alpha",
        config_dir / "alpha" / "b-server.toml",
        {"port": 2},
        [
            ApplicationConfig(config_dir / "alpha" / "applications" / "blog.toml", {"title": "Blog"}),
            ApplicationConfig(config_dir / "alpha" / "applications" / "shop.toml", {"name": "shop"}),
        ],
    )
    assert [a.name for a in alpha.applications] == ["blog", "shop"]
    assert beta == ServerConfig("beta", None, {}, [])


def test_is_lazy(tmp_path: Path):
    task = read_file_configuration(tmp_path / "config")
    write(tmp_path / "config" / "late" / "applications" / "app.toml", 'name = "app"\n')
    result = run(task)
    assert result and result.value[0].applications[0].name == "app"


def test_missing_applications(config_dir: Path):
    (config_dir / "gamma").mkdir()
    result = run(read_file_configuration(config_dir))
    assert isinstance(result, Rejected)
    assert isinstance(result.reason, ProgrammerError)
    assert "gamma/applications" in str(result.reason)


def test_missing_directory(tmp_path: Path):
    result = run(read_file_configuration(tmp_path / "nowhere"))
    assert isinstance(result, Rejected)
    assert isinstance(result.reason, ProgrammerError)


def test_invalid_toml(config_dir: Path):
    write(config_dir / "beta" / "applications" / "broken.toml", "this is = = not toml\n")
    result = run(read_file_configuration(config_dir))
    assert isinstance(result, Rejected)
    assert isinstance(result.reason, StackedError)
    assert "broken.toml" in str(result.reason)
    assert len(result.reason.errors) == 1


def test_config_file_not_utf8(config_dir: Path):
    (config_dir / "beta" / "applications" / "latin1.toml").write_bytes(b"name = \"caf\xe9\"\n")
    result = run(read_file_configuration(config_dir))
    assert isinstance(result, Rejected)
    assert isinstance(result.reason, StackedError)
    assert "latin1.toml" in str(result.reason)
    assert isinstance(result.reason.errors[0], UnicodeDecodeError)


def test_many_application_files(tmp_path: Path):
    root = tmp_path / "config"
    for i in range(500):
        write(root / "big" / "applications" / f"app{i:03}.toml", f"index = {i}\n")
    result = run(read_file_configuration(root))
    assert result
    assert [a.data["index"] for a in result.value[0].applications] == list(range(500))


def test_read_config_file(tmp_path: Path):
    path = tmp_path / "x.toml"
    task = read_config_file(path)
    on_resolved = Mock()

    path.write_text('a = 1\n[b]\nc = "d"\n')
    task.fork(Mock(side_effect=AssertionError), on_resolved)
    on_resolved.assert_called_once_with({"a": 1, "b": {"c": "d"}})


def test_settings(tmp_path: Path):
    with chdir(tmp_path):
        assert Settings.read() == Settings("config")

        Path("pyproject.toml").write_text('[tool.futura]\nconfig_directory = "etc"\n')
        assert Settings.read() == Settings("etc")

        Path("futura.toml").write_text('config_directory = "conf"\n')
        assert Settings.read() == Settings("conf")

        Path("other.json").write_text('{"config_directory": "json"}')
        assert Settings.read(Path("other.json")) == Settings("json")

        Path("bad.toml").write_text('config_directory = 3\n')
        with pytest.raises(InputError):
            Settings.read(Path("bad.toml"))
