"""Dispatch — handler-chain ordering and execution.

Synchronous chains run directly. Asynchronous chains run through a
ContinuationQueue, one unit per chain step.
"""
