"""Domain layer: schemas, collection configuration, databases, collections and records."""
