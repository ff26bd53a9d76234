"""Domain layer: entities, errors and collaborator interfaces."""
