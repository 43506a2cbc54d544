"""
SQLAlchemy models
"""
from tipsplit.core.database import Base
from tipsplit.models.calculation import Calculation  # noqa: F401

__all__ = ["Base", "Calculation"]
