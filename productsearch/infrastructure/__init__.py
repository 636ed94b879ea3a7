"""Infrastructure: configuration, logging and the Elasticsearch gateway."""
