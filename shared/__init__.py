"""
Shared Kernel

Building blocks shared by every domain app: domain events, value objects,
the domain error taxonomy, the message bus and the unit of work.
"""
