# sales/services/__init__.py
#
# order_lifecycle and totals stay importable without a configured Django
# project (the storefront client uses them); import the ORM-backed services
# from their own modules.
