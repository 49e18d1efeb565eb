# Services package init
"""
Blog API — Services Layer
==========================

Service Inventory:
    - PasswordService: bcrypt hashing and comparison, off the event loop
    - TokenService:    signed, expiring access tokens (HS256)
    - Repository:      generic async CRUD over one ORM model
    - UserService:     registration, account CRUD, login
    - PostService / CommentService / LikeService: content CRUD with ownership

Services return Result values; they never build HTTP responses.
"""
