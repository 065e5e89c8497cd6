"""Bookings app package.

This app owns the reservation ledger: reservation rows, the slot lock
protocol that holds a slot while the customer pays, the create/confirm
services wired to the payment gateways and the periodic sweep that
reaps abandoned locks.
"""
