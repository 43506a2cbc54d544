"""
Development entry point: `python main.py` from backend/
"""
import uvicorn

from tipsplit.core.config import get_settings
from tipsplit.main import app  # noqa: F401

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "tipsplit.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
    )
