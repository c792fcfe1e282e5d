"""GridZen: sort the colored tiles before the clock runs out."""

__version__ = "1.0.2"
