"""Version information for SplitCraft."""

version = "0.3.0"
