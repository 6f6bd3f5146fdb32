"""Domain layer — API entities and the error taxonomy.

Pure data and pure functions. Must never import from infrastructure,
services, output, or commands.
"""
