"""Product search catalog service backed by Elasticsearch."""

__version__ = "0.1.0"
