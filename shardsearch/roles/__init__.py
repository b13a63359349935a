"""
Participant roles. Each process selects its role once, from its rank, and
runs the matching component.
"""

from shardsearch.roles.base import Participant
from shardsearch.roles.coordinator import Coordinator
from shardsearch.roles.worker import Worker

__all__ = ["Coordinator", "Participant", "Worker"]
