from argparse import ArgumentParser
from pathlib import Path
import sys
from typing import Optional
import argh  # type: ignore
from rich.console import Console
from rich.table import Table

from rich_argparse import RichHelpFormatter

from .configuration import ServerConfig, Settings, read_file_configuration
from .errors import UserError
from .logging import logger, configure_logger
from .version import __version__

log = logger()


def render(configs: list[ServerConfig]) -> Table:
    t = Table(title="Server Configuration", header_style="italic green", show_edge=False)
    t.add_column("namespace", style="bold yellow")
    t.add_column("server config")
    t.add_column("applications")
    for c in configs:
        apps = ", ".join(a.name for a in c.applications) or "-"
        t.add_row(c.namespace, str(c.path) if c.path else "-", apps)
    return t


@argh.arg("directory", nargs="?", help="configuration directory to read")
@argh.arg("-s", "--settings", help="TOML or JSON settings file")
@argh.arg("-v", "--version", help="print version number and exit")
@argh.arg("--debug", help="more verbose logging")
def futura(
    directory: Optional[str] = None,
    *,
    settings: Optional[str] = None,
    version: bool = False,
    debug: bool = False
):
    """Read and summarize a configuration directory."""
    if version:
        print(f"Futura {__version__}")
        sys.exit(0)

    configure_logger(debug)
    try:
        if directory is None:
            directory = Settings.read(Path(settings) if settings else None).config_directory
    except UserError as e:
        log.error(f"Failed: {e}")
        sys.exit(1)

    failed = False

    def on_rejected(err):
        nonlocal failed
        failed = True
        log.error(f"Failed: {err}")
        for cause in getattr(err, "errors", []):
            log.error(f"  caused by: {cause}")

    def on_resolved(configs: list[ServerConfig]):
        Console().print(render(configs))

    read_file_configuration(directory).fork(on_rejected, on_resolved)
    if failed:
        sys.exit(1)


def cli():
    parser = ArgumentParser(formatter_class=RichHelpFormatter)
    argh.set_default_command(
        parser, futura, name_mapping_policy=argh.NameMappingPolicy.BY_NAME_IF_KWONLY
    )
    argh.dispatch(parser)


if __name__ == "__main__":
    cli()
