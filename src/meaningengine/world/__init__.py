"""World domain: assembling runnable worlds from raw data."""

from meaningengine.world.adapter import WorldAdapter

__all__ = ["WorldAdapter"]
