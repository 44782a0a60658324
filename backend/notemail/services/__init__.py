# Services package init
"""
Notemail Backend — Services Layer
=================================

What:  Business logic sitting between routes (HTTP) and the outside world
       (database, SMTP server).

Service Inventory:
    - NoteService: CRUD over the notes table
    - MailRelay: composes a note as email and hands it to the SMTP transport

Routes handle HTTP; services raise domain exceptions and never build
responses.
"""
