"""Module entrypoint for ``python -m photo_places``."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover - CLI dispatch
    raise SystemExit(main())
