# dimerr/routers/__init__.py
from . import customers
from . import brands
from . import campaigns
from . import products
from . import orders
from . import credit
from . import payments
from . import dashboard
from . import notifications
