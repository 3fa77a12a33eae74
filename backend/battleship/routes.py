from flask import Blueprint, current_app, jsonify

main = Blueprint('main', __name__)


def _rooms():
    return current_app.extensions['rooms']


@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Battleship relay server!'})


@main.route('/api/rooms')
def list_rooms():
    return jsonify(_rooms().lifecycle.list_joinable())


@main.route('/api/rooms/<string:room_id>/availability')
def room_availability(room_id):
    return jsonify({'success': _rooms().lifecycle.check_availability(room_id)})
