"""Interactive 2D particle physics sandbox with a cached, scrubbable simulation timeline."""

__version__ = "0.1.0"