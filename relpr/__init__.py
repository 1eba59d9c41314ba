"""Release pull request automation for changesets-managed repositories."""

__version__ = "0.1.0"
