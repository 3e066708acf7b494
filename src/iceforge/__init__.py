"""iceforge: manifest validation and build ordering for C projects."""

__version__ = "0.1.0"
