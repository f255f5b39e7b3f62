"""Domain core: models, protocols, text processing and services."""
