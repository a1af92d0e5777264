"""Shared state primitives used to decouple resolvers from consumers."""

from locator.comms.broadcast import BroadcastCell, Subscription

__all__ = ["BroadcastCell", "Subscription"]
