"""Domain layer: entities, email routing rules and errors."""
