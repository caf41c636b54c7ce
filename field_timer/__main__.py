"""Allow ``python -m field_timer``."""

from .cli.main import run

if __name__ == "__main__":
    run()
