"""memviz: explore a directory of markdown memory notes as a graph."""

__version__ = "0.1.0"
