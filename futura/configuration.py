from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable
import functools
import json
import tomllib

from .errors import ProgrammerError, StackedError
from .logging import logger
from .task import Task
from .utility import construct, read_data, read_from_file


log = logger()


ALLOWED_CONFIG_FILE_EXTENSIONS = [".toml"]


@dataclass
class Settings:
    config_directory: str = "config"

    @staticmethod
    def read(path: Path | None = None) -> Settings:
        """Read settings from `path`, else from `futura.toml`, else from the
        `[tool.futura]` section of `pyproject.toml`. Defaults apply when
        none of these exist."""
        if path is not None:
            return read_from_file(Settings, path)

        if Path("futura.toml").exists():
            return read_from_file(Settings, Path("futura.toml"))

        if Path("pyproject.toml").exists():
            section = read_data(Path("pyproject.toml")).get("tool", {}).get("futura")
            if section is not None:
                return construct(Settings, section)

        return Settings()


@dataclass
class ApplicationConfig:
    path: Path
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.data.get("name", self.path.stem)


@dataclass
class ServerConfig:
    namespace: str
    path: Path | None = None
    data: dict[str, Any] = field(default_factory=dict)
    applications: list[ApplicationConfig] = field(default_factory=list)


def config_files(directory: Path) -> list[Path]:
    return sorted(
        p for p in directory.iterdir()
        if p.suffix in ALLOWED_CONFIG_FILE_EXTENSIONS and p.is_file()
    )


def _collect[T](items: list[Any], fn: Callable[[Any], Task[Exception, T]]) -> Task[Exception, list[T]]:
    def step(acc: Task[Exception, list[T]], item: Any) -> Task[Exception, list[T]]:
        return acc.chain(lambda done: fn(item).map(lambda x: [*done, x]))

    return functools.reduce(step, items, Task.of([]))


def read_config_file(path: Path) -> Task[Exception, dict[str, Any]]:
    def executor(reject, resolve):
        log.debug("reading `%s`", path)
        try:
            data = read_data(path)
        except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
            reject(StackedError(f"Could not read config file `{path}`", e))
            return
        resolve(data)

    return Task(executor)


def read_config_data(directory: Path) -> Task[Exception, ServerConfig]:
    """Read one namespaced config directory.

    The last config file in `directory` (if any) holds the server config;
    each config file in `directory/applications` holds an application.
    """
    def locate(_, resolve):
        candidates = config_files(directory)
        server_config_path = candidates[-1] if candidates else None

        app_config_directory = directory / "applications"
        if not app_config_directory.is_dir():
            raise ProgrammerError(
                f"Config path expected to be a directory: {app_config_directory}"
            )

        resolve((server_config_path, config_files(app_config_directory)))

    def read(located: tuple[Path | None, list[Path]]) -> Task[Exception, ServerConfig]:
        server_config_path, app_config_paths = located
        server = (
            read_config_file(server_config_path) if server_config_path
            else Task.of({})
        )
        applications = _collect(
            app_config_paths,
            lambda p: read_config_file(p).map(functools.partial(ApplicationConfig, p)),
        )
        return server.chain(lambda data: applications.map(
            lambda apps: ServerConfig(directory.name, server_config_path, data, apps)
        ))

    return Task(locate).chain(read)


def read_file_configuration(config_directory: Path | str) -> Task[Exception, list[ServerConfig]]:
    """A `Task` reading every namespace directory under `config_directory`
    into a `ServerConfig`, in sorted order. Nothing is read before the task
    is forked."""
    config_directory = Path(config_directory)

    def namespaces(reject, resolve):
        if not config_directory.is_dir():
            reject(ProgrammerError(
                f"Config path expected to be a directory: {config_directory}",
                {"config_directory": str(config_directory)}
            ))
            return
        resolve(sorted(p for p in config_directory.iterdir() if p.is_dir()))

    return Task(namespaces).chain(lambda dirs: _collect(dirs, read_config_data))
