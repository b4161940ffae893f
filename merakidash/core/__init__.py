"""Core Application Layer: the request engine and the resource wrappers.

Connects the domain layer with the infrastructure layer through interfaces.
Contains the engine, the Dashboard client facade and the command handler.
"""
