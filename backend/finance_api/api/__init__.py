# finance_api.api package - one router module per resource
from . import auth, categories, health, transactions

__all__ = ["auth", "categories", "health", "transactions"]
