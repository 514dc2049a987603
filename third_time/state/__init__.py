"""
Cycle state machine and break arithmetic.

Sequences IDLE -> WORK_INTERVAL -> SHORT_BREAK -> WORK_INTERVAL ..., with
manual LONG_BREAK and OVERTIME, and keeps the break bank that carries early
or late breaks over into the next break length.
"""
