import simpy
from abc import ABC, abstractmethod
import itertools


class Entity(ABC):
    """
    Abstract base class for entities in SimPy simulation.

    An entity runs its run() generator as a SimPy process started in the
    constructor and keeps a named state whose transitions are logged.
    """
    # Entity ID counter shared across all class instances
    _entity_id_counter = itertools.count()

    def __init__(self, env: simpy.Environment, name: str = None):
        """
        Initialize the entity.

        Args:
            env: The SimPy simulation environment this entity belongs to.
            name: Entity name. Optional. If not specified, auto-generated from class name and ID.
        """
        self.env = env
        self.entity_id: int = next(self._entity_id_counter)
        self.name: str = name if name is not None else f"{self.__class__.__name__}_{self.entity_id}"

        # Concrete classes set their own initial state before calling super().__init__
        if not hasattr(self, 'state'):
            self.state: str = "initial_state"

        self.env.process(self.run())

        print(f'{self.env.now:.2f}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) created.')

    @abstractmethod
    def run(self):
        """
        Generator method that serves as the main SimPy process body for the entity.

        Must be implemented in subclasses; typically an infinite loop that
        yields env.timeout() between units of work.
        """
        pass

    def set_state(self, new_state: str):
        """
        Transition the entity's state.

        Args:
            new_state: String representing the target state for transition.
        """
        if self.state != new_state:
            old_state = self.state
            self.state = new_state
            self._log_state_change(old_state, new_state)

    def get_state(self) -> str:
        return self.state

    def _log_state_change(self, old_state: str, new_state: str):
        print(f'{self.env.now:.2f}: Entity "{self.name}" ({self.__class__.__name__}, ID:{self.entity_id}) state transition: {old_state} -> {new_state}')

