# standoff/__init__.py
from .routes import standoff_bp
from .sockets import register_standoff_socket_handlers

def init_standoff(app, socketio, server):
    app.extensions["standoff"] = server
    app.register_blueprint(standoff_bp)
    register_standoff_socket_handlers(socketio, server)
