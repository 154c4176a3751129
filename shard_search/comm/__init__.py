"""
Worker runtimes exposing blocking collective operations
"""
from .base import Communicator, ROOT
from .threaded import ThreadGroup, ThreadCommunicator

__all__ = [
    "Communicator",
    "ROOT",
    "ThreadGroup",
    "ThreadCommunicator",
]
