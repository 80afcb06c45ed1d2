"""kb-lifecycle: config migration and engagement checks for a knowledge-base workspace."""

__version__ = "0.1.0"
