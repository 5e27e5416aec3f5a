"""benchreport: render CodSpeed benchmark runs as Markdown comparison tables."""

__version__ = "0.1.0"
