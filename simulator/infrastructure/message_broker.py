import simpy

class MessageBroker:
    """
    Topic-based publish-subscribe between the simulation runner and its listeners.

    Every message goes to its topic's Store and, wrapped in an envelope
    {'topic', 'time', 'message'}, to the broadcast pipe read by FlowStatistics.

    Topics:
        escalator/<id>/finished : an agent reached the top of escalator <id>
        simulation/snapshot     : periodic minimal snapshot of the simulation
    """
    def __init__(self, env: simpy.Environment, verbose: bool = True):
        """
        Initialize the message broker

        Args:
            env (simpy.Environment): SimPy environment
            verbose (bool): Print every published message
        """
        self.env = env
        self.verbose = verbose
        self.topics = {}
        self.published = {}  # topic -> number of messages put
        self.broadcast_pipe = simpy.Store(self.env)

    def get_pipe(self, topic: str) -> simpy.Store:
        """Store holding the messages of one topic (created on first use)"""
        if topic not in self.topics:
            self.topics[topic] = simpy.Store(self.env)
        return self.topics[topic]

    def put(self, topic: str, message):
        """
        Publish a message on a topic and on the broadcast pipe
        """
        if self.verbose:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        self.published[topic] = self.published.get(topic, 0) + 1
        self.broadcast_pipe.put({'topic': topic, 'time': self.env.now, 'message': message})
        return self.get_pipe(topic).put(message)

    def get_broadcast_pipe(self) -> simpy.Store:
        return self.broadcast_pipe
