"""API package.

This exposes router modules to simplify test imports like:
	from citepay.api.routes.receipts import router
"""

__all__ = [
	"routes",
]
