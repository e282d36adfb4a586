"""Module entrypoint for ``python -m mdr``."""

from .cli import main


if __name__ == "__main__":
    main()
