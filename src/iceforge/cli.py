"""iceforge command line: load the manifest, verify it, print the build order."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from iceforge import __version__
from iceforge.diagnostics import render_error
from iceforge.models.config import BuildConfig
from iceforge.models.errors import ConfigValidationError
from iceforge.parser.builder import load_config_string
from iceforge.settings import Settings
from iceforge.validation.pipeline import verify_config
from iceforge.validation.probes import PkgConfigProbe, ToolchainProbe

logger = logging.getLogger("iceforge.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="iceforge",
        description="iceforge - C project manifest validation and build ordering",
    )
    parser.add_argument("--version", action="version", version=f"iceforge {__version__}")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND", required=True)

    verify = subparsers.add_parser("verify", help="Validate the manifest and show the build order")
    verify.add_argument(
        "--config",
        type=Path,
        metavar="PATH",
        help="Path to the manifest (default: ./iceforge.yaml)",
    )

    order = subparsers.add_parser("order", help="Print subproject names in build order")
    order.add_argument("--config", type=Path, metavar="PATH", help="Path to the manifest")
    order.add_argument("--json", action="store_true", help="Print a JSON list")
    return parser


def _verified_config(path: Path, settings: Settings) -> BuildConfig | None:
    """Load and verify the manifest; print a diagnostic and return None on failure."""
    try:
        source = path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"error: cannot read {path}: {exc.strerror}", file=sys.stderr)
        return None
    except UnicodeDecodeError as exc:
        print(f"error: cannot decode {path}: {exc.reason} at byte {exc.start}", file=sys.stderr)
        return None

    try:
        config = load_config_string(source)
        return verify_config(
            config,
            toolchain_probe=ToolchainProbe(shell=settings.shell),
            pkg_config_probe=PkgConfigProbe(executable=settings.pkg_config),
        )
    except ConfigValidationError as exc:
        logger.debug("Verification of %s failed: %s", path, exc)
        print(render_error(exc.error, source, str(path)), file=sys.stderr)
        return None


def main(argv: list[str] | None = None, settings: Settings | None = None) -> int:
    args = build_parser().parse_args(argv)
    if settings is None:
        settings = Settings()
    logging.basicConfig(level=settings.log_level.upper())

    path = args.config or settings.config_file
    config = _verified_config(path, settings)
    if config is None:
        return 1

    names = config.subproject_names()
    if args.command == "order":
        print(json.dumps(names) if args.json else "\n".join(names))
    else:
        print(f"{path}: OK")
        for index, subproject in enumerate(config.subprojects, start=1):
            print(f"  {index}. {subproject.name.value} ({subproject.type})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
