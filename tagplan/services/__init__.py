"""Services that combine the engine with its collaborators."""
