# Routes package init
"""
Notemail Backend — API Routes Package
=====================================

Route Inventory:
    - notes.py:   /api/notes CRUD
    - email.py:   GET /api/email/status, POST /api/email/send
    - health.py:  GET /health
    - client.py:  GET / (single-page client)

Routes stay thin: read the request, run the boundary validation pass,
call a service, return the response model.
"""
