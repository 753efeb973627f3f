"""Domain layer: entities, constants and business errors."""
