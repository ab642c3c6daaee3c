"""Allow ``python -m pagelink`` to build the site in the working directory."""

from .cli import main

if __name__ == "__main__":  # pragma: no cover
    main()
