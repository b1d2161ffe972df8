"""crawldsl - scoped navigation and scraping DSL over a DOM engine."""

__version__ = "0.1.0"
