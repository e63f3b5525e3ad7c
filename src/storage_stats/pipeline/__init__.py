"""Pipeline stages: classification, parsing and orchestration."""
