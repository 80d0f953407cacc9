"""Recipes Buddy: middleware between a recipe web client and Spoonacular."""

__version__ = "1.0.0"
