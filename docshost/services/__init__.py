"""Service layer: business rules on top of repositories and storage."""
