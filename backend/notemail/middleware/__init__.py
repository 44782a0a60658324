# Middleware package init
"""
Notemail Backend — Middleware Package
=====================================

Middleware Chain:
    Request → [Request ID] → [Logging] → [GZip] → [CORS] → Route Handler

    - Request ID first, so every log line of the request carries it
    - Logging measures the full handler duration and the final status
"""
