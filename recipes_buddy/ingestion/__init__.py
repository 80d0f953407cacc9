"""Ingestion layer: Spoonacular transport, retry policy and retrieval client."""
