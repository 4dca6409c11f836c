# smith/utils/__init__.py
"""
The `utils` package provides the building blocks a run is assembled from:
document loading, schema and setup validation, prompt assembly, metrics
collection and logging.
"""
