"""
Todo Service package.

Multi-user todo list API: account registration and login, bearer token
authentication and owner-scoped todo CRUD. Build the ASGI app with
``todo_service.main.create_app``.
"""

__version__ = "0.1.0"
