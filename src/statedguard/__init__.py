"""statedguard: scope guards that finalize a resource according to its state.

A guard owns a value and a mutable state, and runs a callback exactly once
when the guard is closed, passing the value and the latest state.
"""
