from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def _registry():
    return current_app.extensions['session_registry']


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the hexduel game server!'})


@main.route('/api/lobby', methods=['GET'])
def get_lobby():
    return jsonify(_registry().lobby_snapshot()), 200


@main.route('/api/stats', methods=['GET'])
def get_stats():
    return jsonify(_registry().stats()), 200


@main.route('/api/matches/<string:match_id>', methods=['GET'])
def get_match(match_id):
    """Returns the current snapshot of a live match."""
    state = _registry().match_snapshot(match_id)
    if state is None:
        return jsonify({'error': 'Match not found'}), 404
    return jsonify(state), 200
