"""Allow running as ``python -m cachepool``"""

from cachepool.cli import app

if __name__ == "__main__":
    app()
