"""Record stores used by the service layer."""
