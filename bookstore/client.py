"""
HTTP client for the bookstore services

One httpx client per service, all sharing a token holder:
- The bearer token (when present) is attached to every request
- Connection failures become ServiceUnavailableError with a readable message
- Error responses become ApiError carrying the server's message

Usage:
    with BookstoreClient() as client:
        client.auth.login("reader@bookstore.io", "secret123")
        books = client.books.search_books("dune")
        client.cart.add_to_cart(user_id, {"book_id": books[0]["id"], ...})
"""

from typing import Any, Optional

import httpx
from loguru import logger


DEFAULT_SERVICE_URLS = {
    "books": "http://localhost:3008/api",
    "users": "http://localhost:3002/api",
    "cart": "http://localhost:3003/api",
    "orders": "http://localhost:3004/api",
}

DEFAULT_TIMEOUT = 5.0


class ApiError(Exception):
    """Error response from a service."""

    def __init__(self, status_code: Optional[int], message: str):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ServiceUnavailableError(ApiError):
    """The service could not be reached at all."""

    def __init__(self, base_url: str):
        url = httpx.URL(base_url)
        target = url.port or url.host
        super().__init__(
            None,
            f"Could not connect to the service. "
            f"Please make sure the {target} microservice is running."
        )
        self.base_url = base_url


class TokenStore:
    """Holds the bearer token shared by all service clients."""

    def __init__(self, token: Optional[str] = None):
        self.token = token

    def set(self, token: str) -> None:
        self.token = token

    def clear(self) -> None:
        self.token = None


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        for key in ("error", "message", "detail"):
            if isinstance(body.get(key), str):
                return body[key]
    return response.reason_phrase


class ServiceClient:
    """Thin wrapper over httpx.Client bound to one service base URL."""

    def __init__(
        self,
        base_url: str,
        tokens: TokenStore,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base_url = base_url
        self.tokens = tokens
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            event_hooks={"request": [self._attach_token]},
        )

    def _attach_token(self, request: httpx.Request) -> None:
        if self.tokens.token:
            request.headers["Authorization"] = f"Bearer {self.tokens.token}"

    def request(self, method: str, path: str, **kwargs) -> Any:
        """
        Send a request and return the decoded JSON body.

        Raises:
            ServiceUnavailableError: No response was received
            ApiError: The service answered with a 4xx/5xx status
        """
        try:
            response = self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"Connection error to {self.base_url}: {e}")
            raise ServiceUnavailableError(self.base_url) from e

        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))

        if not response.content:
            return None
        return response.json()

    def close(self) -> None:
        self._client.close()


class AuthService:
    def __init__(self, client: ServiceClient):
        self._client = client

    def login(self, email: str, password: str) -> dict:
        """Log in and remember the returned token for later calls."""
        result = self._client.request(
            "POST", "/users/login", json={"email": email, "password": password}
        )
        self._client.tokens.set(result["access_token"])
        return result

    def logout(self) -> None:
        self._client.tokens.clear()

    def register(self, email: str, password: str, name: Optional[str] = None) -> dict:
        return self._client.request(
            "POST", "/users/register", json={"email": email, "password": password, "name": name}
        )

    def get_profile(self) -> dict:
        return self._client.request("GET", "/users/me")


class BookService:
    def __init__(self, client: ServiceClient):
        self._client = client

    def get_all_books(self) -> list[dict]:
        return self._client.request("GET", "/books")

    def get_book(self, book_id: str) -> dict:
        return self._client.request("GET", f"/books/{book_id}")

    def search_books(self, query: str) -> list[dict]:
        return self._client.request("GET", "/books/search", params={"q": query})

    def create_book(self, book: dict) -> dict:
        return self._client.request("POST", "/books", json=book)

    def update_book(self, book_id: str, changes: dict) -> dict:
        return self._client.request("PUT", f"/books/{book_id}", json=changes)

    def update_stock(self, book_id: str, stock: int) -> dict:
        return self._client.request("PATCH", f"/books/{book_id}/stock", json={"stock": stock})

    def delete_book(self, book_id: str) -> dict:
        return self._client.request("DELETE", f"/books/{book_id}")


class CartService:
    def __init__(self, client: ServiceClient):
        self._client = client

    def get_cart(self, user_id: str) -> dict:
        return self._client.request("GET", f"/cart/{user_id}")

    def add_to_cart(self, user_id: str, item: dict) -> dict:
        return self._client.request("POST", f"/cart/{user_id}/items", json=item)

    def update_quantity(self, user_id: str, book_id: str, quantity: int) -> dict:
        return self._client.request(
            "PUT", f"/cart/{user_id}/items/{book_id}", json={"quantity": quantity}
        )

    def remove_from_cart(self, user_id: str, book_id: str) -> dict:
        return self._client.request("DELETE", f"/cart/{user_id}/items/{book_id}")

    def checkout(self, user_id: str) -> dict:
        return self._client.request("POST", f"/cart/{user_id}/checkout")


class OrderService:
    def __init__(self, client: ServiceClient):
        self._client = client

    def get_user_orders(self, user_id: str) -> list[dict]:
        return self._client.request("GET", f"/orders/user/{user_id}")

    def get_order(self, order_id: str) -> dict:
        return self._client.request("GET", f"/orders/{order_id}")


class BookstoreClient:
    """
    Client for all four services.

    Args:
        urls: Base URL per service name; missing entries use DEFAULT_SERVICE_URLS
        timeout: Per-request timeout in seconds
        token: Initial bearer token
        transport: Optional httpx transport shared by all service clients
    """

    def __init__(
        self,
        urls: Optional[dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        token: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.urls = {**DEFAULT_SERVICE_URLS, **(urls or {})}
        self.tokens = TokenStore(token)

        self._clients = {
            name: ServiceClient(url, self.tokens, timeout=timeout, transport=transport)
            for name, url in self.urls.items()
        }

        self.auth = AuthService(self._clients["users"])
        self.books = BookService(self._clients["books"])
        self.cart = CartService(self._clients["cart"])
        self.orders = OrderService(self._clients["orders"])

    def close(self) -> None:
        for client in self._clients.values():
            client.close()

    def __enter__(self) -> "BookstoreClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
