"""OuraMind — encrypted journaling with emotion classification, tool suggestions and mood trends."""

__version__ = "0.1.0"
