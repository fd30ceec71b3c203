"""Background services that run alongside the Socket.IO handlers.

Each service is a cooperative Flask-SocketIO background task; it takes the
registry lock for its work so it only ever runs between event handlers.
"""
