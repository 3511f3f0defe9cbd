"""Machine-readable exporters for scan results."""
