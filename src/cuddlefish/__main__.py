"""Entry point for python -m cuddlefish."""

from .cli import main

if __name__ == "__main__":
    main()
