"""
Service layer abstraction.

Services encapsulate validation and storage access so that API handlers
only translate between HTTP and domain calls.
"""
