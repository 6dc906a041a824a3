"""Entry point for ``python -m taskcanvas``."""

from .cli import main

if __name__ == "__main__":
    main()
