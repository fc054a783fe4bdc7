"""
Cookbook REST API.

Provides a DRF ViewSet for Recipe backed by cookbook.service.recipes:
list (filters or `_q` search), count, retrieve, create, update, destroy.
"""
