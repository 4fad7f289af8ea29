# Routes package init
"""
Users API — API Routes Package
===============================

Route Inventory:
    - users.py:   POST/GET /users, GET/PATCH/DELETE /users/{id}
    - health.py:  GET /health

Design Principle:
    Routes are THIN: pull the path parameter and body, call UserService,
    return its result. Status codes for failures come from the exception
    handlers registered in main.py.
"""
