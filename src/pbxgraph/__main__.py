"""Module entrypoint for ``python -m pbxgraph``."""

from __future__ import annotations

from pbxgraph.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
