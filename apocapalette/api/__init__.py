"""Apocapalette HTTP API routers."""
