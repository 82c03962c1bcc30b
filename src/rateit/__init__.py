"""RateIt: movie search, detail and watched-list client."""

__version__ = "0.1.0"
