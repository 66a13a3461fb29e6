"""Note-taking state library: an entry store behind a byte-payload boundary."""

__version__ = "0.3.0"
