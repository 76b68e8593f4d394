"""Utility helpers for the office records workbench."""
