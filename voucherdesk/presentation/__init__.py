# voucherdesk/presentation/__init__.py
