"""Graph domain: in-memory graphs derived from seed data."""

from meaningengine.graph.seed import SeedGraph

__all__ = ["SeedGraph"]
