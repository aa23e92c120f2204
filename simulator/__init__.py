"""
Escalator Simulator - Core simulation engine

This package provides the crowd / escalator model, the per-agent state
machine and the SimPy infrastructure used to run it.
"""

__version__ = "0.1.0"

from .core.kernel import weight, weights
from .core.geometry import Box
from .core.crowd import Crowd
from .core.escalator import EscalatorBelt, EscalatorGeometry
from .core.simulation import Simulation, FinishEvent
from .core.runner import SimulationRunner
from .core.entity import Entity

from .infrastructure.message_broker import MessageBroker
from .infrastructure.realtime_env import RealtimeEnvironment

__all__ = [
    'weight',
    'weights',
    'Box',
    'Crowd',
    'EscalatorBelt',
    'EscalatorGeometry',
    'Simulation',
    'FinishEvent',
    'SimulationRunner',
    'Entity',
    'MessageBroker',
    'RealtimeEnvironment',
]
