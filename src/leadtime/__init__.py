"""Pull request lead time analysis for GitHub teams."""

__version__ = "0.1.0"
