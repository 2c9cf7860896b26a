"""Apocapalette color and token services."""
