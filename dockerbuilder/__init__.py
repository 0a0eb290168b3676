"""Build and publish container images for upstream package releases."""

__version__ = "0.3.0"
