"""Package version and generator identification."""

__version__ = "0.1.0"

GENERATOR_NAME = f"lookatni-py v{__version__}"
