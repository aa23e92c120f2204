"""Core simulation entities"""

from .entity import Entity
from .kernel import weight, weights
from .geometry import Box
from .crowd import Crowd
from .escalator import EscalatorBelt, EscalatorGeometry
from .simulation import Simulation, FinishEvent
from .runner import SimulationRunner

__all__ = [
    'Entity',
    'weight',
    'weights',
    'Box',
    'Crowd',
    'EscalatorBelt',
    'EscalatorGeometry',
    'Simulation',
    'FinishEvent',
    'SimulationRunner',
]
