from flask import Blueprint, current_app, jsonify

from app.openapi import build_spec

bp = Blueprint('docs', __name__, url_prefix='/api')


@bp.route('/openapi.json')
def openapi_document():
    """OpenAPI document generated from the view docstrings."""
    return jsonify(build_spec(current_app).to_dict())
