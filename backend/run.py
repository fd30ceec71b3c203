import os

from chainreaction import create_app, get_registry, socketio

app = create_app()

if __name__ == '__main__':
    try:
        # Use SocketIO server to enable websockets in dev
        socketio.run(app, port=int(os.environ.get('PORT', '3001')), debug=True)
    finally:
        get_registry(app).close()
