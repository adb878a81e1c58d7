"""Module entrypoint for ``python -m s3g_reencap``."""

from .cli import main

if __name__ == "__main__":
    main()
