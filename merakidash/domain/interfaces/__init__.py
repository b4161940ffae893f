"""Domain Interfaces (Ports):

Defines the contracts (Abstract Base Classes) that infrastructure components
must implement. The request engine depends on these interfaces, not on
concrete implementations.
"""
