"""Utility helpers for gitbook2epub."""
