# Services package init
"""
Users API — Services Package
=============================

What:  Store-facing layer between the routes and the MongoDB driver.

Services:
    - user_service.py: UserService (create, list, get, update, delete)
"""
