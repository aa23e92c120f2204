"""
Core Simulation Tests

Tests for the crowd / escalator model:
- Smoothing kernel
- Crowd placement and repulsion
- Escalator belt geometry, motion and collision
- Per-agent state machine, snapshots and the SimPy runner
"""
