# ==== SERVICES PACKAGE ==== #

"""
Services package for the request lifecycle engine.

This package contains the transition table and state machine, SLA deadline
calculation and breach monitoring, recurrence and pricing calculators, and
the request-type policy loader.
"""
