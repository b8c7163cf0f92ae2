# voucherdesk/utils/__init__.py
