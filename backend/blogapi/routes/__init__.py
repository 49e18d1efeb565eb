# Routes package init
"""
Blog API — Routes Package
==========================

Route Inventory:
    - users.py:     /api/users     (register, login, CRUD on own account)
    - posts.py:     /api/posts     (CRUD, author from token)
    - comments.py:  /api/comments  (CRUD on comments of existing posts)
    - likes.py:     /api/likes     (like / unlike, one like per user and post)
    - health.py:    /health        (database probe)

Routes stay thin: each one names its pipeline stages and a one-line action
that calls a service. Business rules live in blogapi/services.
"""
