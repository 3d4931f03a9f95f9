"""ArtFestLive: live scoreboard and back office for the Pearl art festival."""

__version__ = "0.1.0"
