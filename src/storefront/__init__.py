"""Storefront API: user accounts and a product catalog with image uploads."""

__version__ = "0.1.0"
