"""Object store readers."""
