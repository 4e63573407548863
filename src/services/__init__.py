"""Business logic services used by handlers.

Services create boto3 clients in their constructors, so handlers load them
lazily rather than at import time.
"""
