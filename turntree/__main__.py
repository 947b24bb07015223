"""Allow running as ``python -m turntree``."""

from .cli import main

if __name__ == "__main__":
    main()
