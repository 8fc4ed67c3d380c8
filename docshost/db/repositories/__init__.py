"""Repository helpers (thin query wrappers around app_session)."""
