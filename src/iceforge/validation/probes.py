"""External-process probes: compiler lookup, C standard support, pkg-config queries."""

from __future__ import annotations

import logging
import shlex
import subprocess

logger = logging.getLogger("iceforge.probes")


class ToolchainProbe:
    """Asks the host system about a C compiler.

    Both checks spawn a fresh process and block until it exits; there is no
    timeout.
    """

    def __init__(self, shell: str = "sh") -> None:
        self.shell = shell

    def resolve(self, compiler: str) -> str | None:
        """Return the absolute path of ``compiler`` on ``PATH``, or ``None``."""
        try:
            result = subprocess.run(
                [self.shell, "-c", f"which {shlex.quote(compiler)}"],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.info("Could not spawn %s to resolve compiler %r: %s", self.shell, compiler, exc)
            return None
        tokens = result.stdout.split()
        return tokens[0] if tokens else None

    def supports_standard(self, compiler_path: str, standard: str) -> bool:
        """Compile an empty translation unit with ``-std=<standard>``."""
        try:
            result = subprocess.run(
                [compiler_path, f"-std={standard}", "-o", "/dev/null", "-x", "c", "-c", "-"],
                input="",
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            logger.info("Could not run %s: %s", compiler_path, exc)
            return False
        if result.returncode != 0:
            logger.debug("%s rejected -std=%s: %s", compiler_path, standard, result.stderr.strip())
        return result.returncode == 0


class PkgConfigProbe:
    """Checks that a pkg-config query resolves on the host system."""

    def __init__(self, executable: str = "pkg-config") -> None:
        self.executable = executable

    def exists(self, query: str) -> bool:
        try:
            result = subprocess.run(
                [self.executable, "--exists", query],
                capture_output=True,
                check=False,
            )
        except OSError as exc:
            logger.info("Could not run %s: %s", self.executable, exc)
            return False
        return result.returncode == 0
