"""depgraph — interactive dependency-graph client.

Graph model, layout, spotlight and timeline live in :mod:`depgraph.graph`;
the request state machine in :mod:`depgraph.controller`.
"""
