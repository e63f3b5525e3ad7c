"""Record and table models."""
