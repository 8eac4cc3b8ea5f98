"""Package file managers."""
