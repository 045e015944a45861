"""Allow ``python -m draftwright``."""

from draftwright.cli import main

if __name__ == "__main__":
    main()
