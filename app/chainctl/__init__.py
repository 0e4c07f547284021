"""chainctl - chain configuration management for multi-project builds."""

__version__ = "0.1.0"
