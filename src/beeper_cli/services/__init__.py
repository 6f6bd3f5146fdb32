"""Service layer — background work layered over infrastructure.

Services may import from domain and infrastructure layers.
They must never import from commands or output.
"""
