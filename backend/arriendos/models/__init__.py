from .client import Client
from .product import Product
from .rent import Rent
from .user import User

__all__ = ["Client", "Product", "Rent", "User"]
