# ==== BUSINESS LOGIC PACKAGE ==== #

"""
Business logic package for the request lifecycle domain.

This package contains the status and action vocabulary, the error taxonomy,
and the immutable value objects for tiered pricing and recurring schedules.
"""
