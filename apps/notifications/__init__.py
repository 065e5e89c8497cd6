"""Notifications app package.

Sends transactional e-mail: reservation confirmations to the customer and
the host, and free-form messages a host writes to a customer.
"""
