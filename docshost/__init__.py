"""docshost: documentation host for published crates.

Subpackages:
    config    environment accessors
    db        SQLAlchemy engine, models and repositories
    storage   stored documentation and source files
    services  crate, release and admin operations
    views     navigation header view-model and template helpers
    routes    Flask blueprints
    startup   application factory and wiring
"""

__all__ = [
]
