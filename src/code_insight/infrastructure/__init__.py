"""
Infrastructure Layer

Concrete adapters for the engine's collaborators: key-value stores, the
workspace editor adapter and the panel message channel.
"""
