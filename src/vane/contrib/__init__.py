"""Optional integrations for Vane."""
