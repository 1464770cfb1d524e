"""CLI interface for hdcpush."""

import logging
from pathlib import Path
from typing import Any

import click

from .agent import HdcAgent
from .config import DEFAULT_HDC, DEFAULT_PACKAGE_DIR, get_record_path, resolve_workdir
from .exceptions import HdcPushError
from .output import OutputFormatter
from .sync import PushEngine, PushTarget, SyncRecordStore

logger = logging.getLogger(__name__)


def confirm_with_user(prompt: str) -> bool:
    """Ask a yes/no question on the terminal, defaulting to yes."""
    return click.confirm(prompt, default=True)


@click.command()
@click.option(
    "--connectkey",
    "-t",
    "connect_key",
    required=True,
    help="Connection key of the target device",
)
@click.option(
    "--build-dir",
    "-d",
    required=True,
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory containing OpenHarmony build files",
)
@click.option(
    "--build-package-dir",
    default=DEFAULT_PACKAGE_DIR,
    show_default=True,
    help="Directory containing OpenHarmony build packages, "
    "which reflects the directory structure of the device",
)
@click.option("--push", "-p", is_flag=True, help="Push new files without asking")
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Also push files modified exactly at the last recorded time",
)
@click.option(
    "--hdc",
    "hdc_path",
    envvar="HDCPUSH_HDC",
    default=DEFAULT_HDC,
    show_default=True,
    help="hdc executable used to talk to the device",
)
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output")
@click.option("--debug", is_flag=True, help="Print debug logs")
@click.version_option(package_name="hdcpush")
@click.pass_context
def main(
    ctx: Any,
    connect_key: str,
    build_dir: Path,
    build_package_dir: str,
    push: bool,
    force: bool,
    hdc_path: str,
    quiet: bool,
    debug: bool,
) -> None:
    """Push OpenHarmony build files changed since the last sync to a device."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%H:%M:%S",
        )
        logging.getLogger("hdcpush").setLevel(logging.DEBUG)
    else:
        logging.basicConfig(level=logging.WARNING)

    out = OutputFormatter(quiet=quiet)
    target = PushTarget(
        connect_key=connect_key,
        build_dir=build_dir,
        package_dir=build_package_dir,
        push=push,
        force=force,
    )

    try:
        workdir = resolve_workdir()
        store = SyncRecordStore(get_record_path(workdir))
        store.load()

        engine = PushEngine(
            store=store,
            agent=HdcAgent(connect_key, hdc_path=hdc_path),
            output=out,
            confirm=confirm_with_user,
        )
        engine.run(target)
    except HdcPushError as e:
        out.error(e.message)
        ctx.exit(1)
    except KeyboardInterrupt:
        out.warning("\nCancelled by user")
        ctx.exit(130)


if __name__ == "__main__":
    main()
