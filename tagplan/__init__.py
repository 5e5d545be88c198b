"""Release-policy engine for CI pipelines: flows, version forecasts and image tag plans."""

__version__ = "0.1.0"
