"""Storefront HTTP API package.

Routers live in their own modules and are imported from there directly.
"""
