"""Inventory API: products, categories, and a central error classifier."""
