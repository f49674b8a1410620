"""create-effect-app -- scaffold Effect projects from templates and examples."""

__version__ = "0.1.0"
