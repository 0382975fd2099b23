# modules/reference/routes.py
from flask import Blueprint, jsonify, request

from modules.reference import services

bp = Blueprint('reference', __name__, url_prefix='/api')


@bp.get('/types')
def types():
    """["Blow", "Roto", ...]"""
    return jsonify(services.fetch_types())


@bp.get('/machines')
def machines():
    """/api/machines?type=Blow → [{id, name, type}]"""
    type_name = request.args.get('type', type=str)
    if not type_name:
        return jsonify({"error": "type is required"}), 400
    return jsonify(services.fetch_machines(type_name))


@bp.get('/items')
def items():
    """/api/items?type=Blow → [{id, category, subCategory, size}] (type — тип машини)"""
    machine_type = request.args.get('type', type=str)
    if not machine_type:
        return jsonify({"error": "type is required"}), 400
    return jsonify(services.fetch_items(machine_type))


@bp.get('/doers')
def doers():
    return jsonify(services.fetch_doers())


@bp.get('/supervisors')
def supervisors():
    return jsonify(services.fetch_supervisors())
