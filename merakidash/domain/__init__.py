"""Domain Layer: value objects, interfaces (ports), events and the error taxonomy.

Nothing in here performs I/O. Infrastructure adapters implement the
interfaces; the core layer depends only on this package's contracts.
"""
