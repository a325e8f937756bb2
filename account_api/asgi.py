"""ASGI entry point: ``uvicorn account_api.asgi:app``."""

from account_api.main import create_app

app = create_app()
