"""APK version handling and package token parsing."""
