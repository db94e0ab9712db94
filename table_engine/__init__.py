"""Generic tabular data engine: pagination, managed fetching, selection and status."""

__version__ = "0.1.0"
