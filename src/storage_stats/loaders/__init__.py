"""Warehouse sinks and the object store router."""
