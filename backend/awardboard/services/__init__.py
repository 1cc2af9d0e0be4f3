# Services package init
"""
AwardBoard Backend - Services Layer
=====================================

Service Inventory:
    - CredentialStore: users, bcrypt hashes, award sets
    - SessionStore (abstract) / InMemorySessionStore: token → username
    - AuthService: signup, authenticate, login/logout, restore, change password
    - CommentService: add, remove, list the comment board
    - FixedWindowRateLimiter: per-session limit on /home
    - exponential: number formatting behind /exponential

Services receive the database session per call and keep no per-request
state; module-level singletons are shared by the routes and the pipeline.
"""
