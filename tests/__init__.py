"""
Bookstore Services Test Suite

Tests are organized into:
- unit/: Unit tests for repositories, notifier and client
- integration/: API tests through the ASGI app
"""
