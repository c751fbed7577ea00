"""docnav - navigation sidebar state engine for documentation sites."""

__version__ = "0.1.0"
