"""Package datasources."""
