"""Payment provider clients.

Two hosted checkout flows are supported: an order/HMAC signature flow
(Razorpay) and a hashed form-post flow (PayU). Clients are plain objects
built from settings and handed to the reservation service.
"""
