from .catalog import Category, Product, StockMovement
from .orders import Order, OrderItem
from .tables import DiningTable
from .clients import Client
from .staff import StaffMember
from .settings import Setting

__all__ = [
    'Category', 'Product', 'StockMovement',
    'Order', 'OrderItem',
    'DiningTable',
    'Client',
    'StaffMember',
    'Setting',
]
