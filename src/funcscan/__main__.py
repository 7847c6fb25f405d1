"""Module entrypoint so `python -m funcscan` works."""

from .cli import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
