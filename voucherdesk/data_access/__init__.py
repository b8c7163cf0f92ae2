# voucherdesk/data_access/__init__.py

from .api_client import ApiClient
from .base_repository import BaseRepository
from .invoices_repository import InvoicesRepository
