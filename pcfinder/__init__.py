"""PC Finder engine: build recommendation and synergy scoring."""

__version__ = "0.1.0"
