"""Infrastructure package: configuration loaded from the environment."""
