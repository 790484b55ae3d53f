"""Configuration helpers: YAML loading, schema validation and logging setup."""
