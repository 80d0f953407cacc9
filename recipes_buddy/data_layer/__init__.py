"""Value types and error taxonomy shared by every layer."""
