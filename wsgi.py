"""
WSGI entry point for hosts that only speak WSGI.
The API is ASGI, so it is wrapped with the a2wsgi adapter. Websocket
invalidation events need an ASGI server (uvicorn) and are unavailable here.
"""
from a2wsgi import ASGIMiddleware
from app.main import app

application = ASGIMiddleware(app)
