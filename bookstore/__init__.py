"""
Bookstore Services

Microservice backend for a small online bookstore:
- Book catalog with best-effort change notifications
- User accounts and bearer-token authentication
- Per-user shopping carts with checkout
- Read-only order history
"""

__version__ = "1.0.0"
