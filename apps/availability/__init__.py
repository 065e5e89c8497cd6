"""Availability app package.

Hosts describe when they can be booked with availability rules: weekly
recurring windows or one-off windows pinned to a calendar date. This app
owns the rule store and the read side of the scheduling engine: interval
arithmetic, slot generation for a calendar date, the availability
resolver (day and month views) and price resolution for a single instant.
"""
