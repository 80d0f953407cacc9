"""Nutrition calculations."""
