"""ruleforge: declarative, async-friendly validation rules for Python objects."""

__version__ = "0.1.0"
