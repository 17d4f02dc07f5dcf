"""`python -m keystone` entrypoint.

For installed usage, prefer the `keystone` console script.
"""

from __future__ import annotations

from .core.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
