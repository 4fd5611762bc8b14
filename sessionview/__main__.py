"""Module entrypoint for ``python -m sessionview``."""

from .cli import main


if __name__ == "__main__":
    main()
