"""Routing — route tree, named parameter tokens, and path matching.

Routes are registered through the Router facade and stored in a tree of
segment nodes that is walked once per dispatched phase.
"""
