"""Person Records: scripted CRUD workflow over a MongoDB people collection."""

__version__ = "0.1.0"
__author__ = "Person Records Team"

__all__ = ["__version__", "__author__"]
