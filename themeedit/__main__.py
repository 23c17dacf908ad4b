"""Entry point for `python -m themeedit`."""

import sys


def main():
    from themeedit.app import run_app
    sys.exit(run_app())


if __name__ == "__main__":
    main()
