"""Mirror the latest Last.fm scrobble into a Twitter profile description."""

__version__ = "0.1.0"
