# publicview/service/__init__.py

"""Settings-driven response rendering service."""
