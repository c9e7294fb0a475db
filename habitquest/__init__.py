"""habitquest: progression and streak engine for RPG-style habit tracking."""

__version__ = "0.1.0"
