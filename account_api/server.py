"""Run the API with uvicorn.

Usage:
    account-api
    python -m account_api.server
"""
import uvicorn

from account_api.core.config import load_settings
from account_api.main import create_app


def main() -> None:
    settings = load_settings()
    uvicorn.run(create_app(settings), host='0.0.0.0', port=settings.port, log_level=settings.log_level.lower())


if __name__ == '__main__':
    main()
