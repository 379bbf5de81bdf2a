from santa.services.assignment import AssignmentError, solve
from santa.services.registry import ConfigurationError, Participant, ParticipantRegistry

__all__ = ["AssignmentError", "ConfigurationError", "Participant", "ParticipantRegistry", "solve"]
