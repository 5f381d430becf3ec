"""Allow ``python -m hn_digest``."""

from hn_digest.cli import cli


if __name__ == "__main__":
    cli()
