"""Game domain services: board validation, puzzle generation, session registry
and the per-session coordinator.

This package holds the transport-free game logic that the HTTP routes and
Socket.IO handlers call into, keeping transport concerns separated from the
core game mechanics.
"""
