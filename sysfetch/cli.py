"""Entry point for the sysfetch command line tool."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from .art import ArtRepository
from .config import Config, load_config
from .formatting import render
from .records import InfoRecord, PlatformContext
from .system_state import detect_platform, gather_info

logger = logging.getLogger("sysfetch")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sysfetch",
        description="Show system information next to ASCII art.",
    )
    parser.add_argument("--name", help="Name to display instead of the hostname")
    parser.add_argument("--system", help="Force the ASCII art for a specific system")
    parser.add_argument("--list-systems", action="store_true", help="List all systems with ASCII art and exit")
    parser.add_argument("--config", metavar="PATH", help="YAML file overriding the default configuration")
    parser.add_argument("--art-dir", metavar="DIR", help="Directory holding the ASCII art *.txt files")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    repository = ArtRepository(args.art_dir)
    if args.list_systems:
        for system in repository.list_available_systems():
            print(system)
        return 0

    config = load_config(args.config)
    console = Console(highlight=False, soft_wrap=True)
    for line in fetch_lines(repository, config, system=args.system, name=args.name):
        console.print(line)
    return 0


def fetch_lines(
    repository: ArtRepository,
    config: Config,
    system: Optional[str] = None,
    name: Optional[str] = None,
    context: Optional[PlatformContext] = None,
) -> List[Text]:
    """Gather information and render it; ``system`` only changes the art."""
    try:
        context = context or detect_platform()
        info = gather_info(context)
    except Exception:
        logger.exception("Could not gather system information")
        context = PlatformContext(system="unknown")
        info = InfoRecord()

    art: List[str] = []
    if system and not repository.has_art(system):
        logger.info("No art named %r; using the closest match", system)
    if config.display.show_ascii_art:
        art = repository.get_art(repository.system_for(info, context, forced=system))
    return render(info, art, config, name=name)


if __name__ == "__main__":
    sys.exit(main())
