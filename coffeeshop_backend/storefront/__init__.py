"""
Storefront / POS client core.

Talks to the backend gateway over HTTP and keeps a local mirror of the
catalog and orders. Nothing here needs a configured Django project.
"""
