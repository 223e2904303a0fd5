"""Registry tables in TOML form."""
