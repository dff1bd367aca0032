from flask import Blueprint, jsonify, current_app

main = Blueprint('main', __name__)

@main.route('/')
def index():
    ctx = current_app.extensions['rendezvous']
    return jsonify({
        'message': 'Rendezvous server is running',
        'supported_game_versions': sorted(ctx.versions),
        'latest_version': ctx.latest_version,
        'stats': ctx.sink.snapshot(),
    })
