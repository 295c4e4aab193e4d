"""Main entry point for prsweep."""

from prsweep.cli import main

if __name__ == "__main__":
    main()
