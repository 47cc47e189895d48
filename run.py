from standoff.app import create_app

app = create_app()
socketio = app.extensions['socketio']

if __name__ == '__main__':
    # SocketIO server so websockets work in dev
    socketio.run(
        app,
        host=app.config['HOST'],
        port=app.config['PORT'],
        debug=app.config['DEBUG'],
        allow_unsafe_werkzeug=True,
    )
