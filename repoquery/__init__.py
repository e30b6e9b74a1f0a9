"""SQL functions and table-valued queries over code hosts, registries and config formats."""

__version__ = "0.1.0"