"""Flask blueprints for the HTTP surface; see `inject.register_all`."""
