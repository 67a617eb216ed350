"""Target implementations, one per kind of catalog category."""
