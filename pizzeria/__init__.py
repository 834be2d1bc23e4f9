"""
                Agustin Pizzeria Order API

Order-management backend for a single-vendor food ordering service:
catalog listing, order quoting, order placement, order tracking and a
live operations dashboard.

License: MIT
"""

__version__ = "1.0.0"
