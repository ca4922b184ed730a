"""stackctl - local development and deployment workflows for containerised projects."""

__version__ = "0.1.0"
