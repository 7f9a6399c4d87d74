"""Company store: purchases, employee credit and monthly reporting."""

__version__ = "0.1.0"

__all__ = ["__version__"]
