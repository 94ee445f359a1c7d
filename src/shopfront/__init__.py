"""Shopfront — a small product catalog with an admin editor, a storefront
and a live support chat.

Both front ends share a single JSON file of products; the storefront also
relays chat messages to every open WebSocket connection.
"""

__version__ = "0.1.0"
