"""gha-pin: pin GitHub Actions references to commit SHAs."""

__version__ = "0.1.0"
