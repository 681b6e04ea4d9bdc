"""Top-level package for the traffic citation receipt API.

This package contains the FastAPI backend that prints official receipts
for settled traffic citations: database models, Pydantic schemas, the
receipt pipeline (fine tiers, amount in words, fixed-layout PDF
rendering) and the API routers.

To run the API locally you can execute:

```bash
uvicorn citepay.api.main:app --reload
```

Configuration values are read from environment variables or a ``.env``
file at the project root.
"""

__all__: list[str] = []
