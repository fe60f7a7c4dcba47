"""Client-side session bridge for the storefront's e-commerce platform API."""

__version__ = "0.1.0"
