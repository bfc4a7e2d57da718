"""Keep an Obsidian vault and a Zola site tree in sync."""

__version__ = "0.3.0"
