"""Module entrypoint for ``python -m buftui``."""

from .cli import main


if __name__ == "__main__":
    main()
