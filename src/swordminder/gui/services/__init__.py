"""GUI-layer services shared through the service locator."""
