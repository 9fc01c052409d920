"""Layered quadrant shapes: parsing, manipulation, buildability checks and map files."""

__version__ = "0.1.0"
__all__ = ["codes", "creatable", "filemap", "item", "parser", "shape"]