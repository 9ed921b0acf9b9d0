"""REST demo API with best-effort IAM caller inference."""

__version__ = "0.1.0"
