# Routes package init
"""
AwardBoard Backend - Route Handlers Package
=============================================

Route Inventory:
    - account.py:  GET /, POST /login, POST /signup, POST /change_password,
                   GET /logout, GET /me
    - comments.py: POST /add_comment, POST /remove_comment, GET /comments
    - awards.py:   GET /home, GET /brewCoffee, GET /area51,
                   GET /exponential/{x}/{f}, catch-all fallback
    - health.py:   GET /health

Handlers either answer directly (JSON, redirects) or settle an award code
and defer to the award pipeline, which renders the page.
"""
