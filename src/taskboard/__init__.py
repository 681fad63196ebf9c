"""
Taskboard backend package.

The FastAPI application lives in ``taskboard.main`` (``taskboard.main:app``);
it is not imported here so that importing the domain modules has no side
effects such as logging configuration.
"""

__version__ = "0.1.0"
