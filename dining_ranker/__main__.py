"""Entry point for python -m dining_ranker."""
from .main import run


if __name__ == "__main__":
    run()
