"""Domain layer - wire data contracts with no transport dependencies."""
