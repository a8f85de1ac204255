"""Storefront backend: catalogue, per-user cart, reviews and auth."""
