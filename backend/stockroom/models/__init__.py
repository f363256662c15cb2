from .inventory import Product, Category
from .sales import Sale
from .auth import User, SessionToken
from .security import SecurityEvent
from .settings import StoreSetting

__all__ = [
    'Product', 'Category',
    'Sale',
    'User', 'SessionToken',
    'SecurityEvent',
    'StoreSetting',
]
