"""CLI entry point: run `gomodup module [version]` or `python -m gomodup module [version]`."""

import logging
import sys
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .utils.config import UpgradeConfig

DESCRIPTION = """\
Upgrades the named module dependency to the specified version,
or, if no version is given, to the highest major version available.

The module should be given as a fully qualified module path
(including the major version component, if applicable).
For example: github.com/nathanjcochran/gomod.
"""


def _configure_logging(config: "UpgradeConfig") -> None:
    logger = logging.getLogger("gomodup")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if config.verbose else logging.WARNING)
    logger.propagate = False


def main(argv: Optional[List[str]] = None) -> int:
    import argparse
    from .driver import UpgradeDriver
    from .shared.errors import UpgradeError
    from .utils.config import DEFAULT_MODFILE, UpgradeConfig

    parser = argparse.ArgumentParser(
        prog="gomodup",
        usage="%(prog)s [-f modfile path] [-v] module [version]",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("module", help="module path of the dependency to upgrade")
    parser.add_argument("version", nargs="?", default=None, help="target version (default: highest major)")
    parser.add_argument("-f", dest="modfile", default=DEFAULT_MODFILE, help=f"go.mod file path (default: {DEFAULT_MODFILE})")
    parser.add_argument("-v", dest="verbose", action="store_true", help="verbose output")
    args = parser.parse_args(argv)

    config = UpgradeConfig.from_env(modfile=args.modfile, verbose=args.verbose)
    _configure_logging(config)

    try:
        UpgradeDriver(config).upgrade(args.module, args.version)
    except UpgradeError as e:
        sys.stderr.write(f"{e.render()}\n")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
