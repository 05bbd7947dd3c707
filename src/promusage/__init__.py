"""promusage - inventory of the metrics and labels referenced by PromQL queries."""

__version__ = "0.1.0"
