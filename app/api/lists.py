from flask import Blueprint, jsonify, request

from app.api.common import get_json_body, missing_body, parse_path_id
from app.services.list_service import ListService
from app.utils.validators import parse_bool_param

bp = Blueprint('lists', __name__, url_prefix='/api/lists')


@bp.route('', methods=['POST'])
def create_list():
    """Create List
    ---
    post:
        summary: Create a list
        requestBody:
            content:
              application/json:
                schema: ListCreateSchema
        responses:
            201:
                description: Returns the created list
                content:
                  application/json:
                    schema: ListCreatedResponseSchema
            400:
                description: Invalid list name or visibility flag
                content:
                  application/json:
                    schema: ErrorSchema
    """
    data = get_json_body()
    if data is None:
        return missing_body()

    result, status_code = ListService.create_list(data)
    return jsonify(result), status_code


@bp.route('/<list_id>/spots', methods=['POST'])
def add_spot_to_list(list_id):
    """Add Spot To List
    ---
    post:
        summary: Add a spot to a list
        parameters:
            - name: list_id
              in: path
              required: true
              schema:
                type: integer
        requestBody:
            content:
              application/json:
                schema: ListSpotCreateSchema
        responses:
            201:
                description: Returns the new association
            404:
                description: List, spot or thumbnail image not found
                content:
                  application/json:
                    schema: ErrorSchema
            409:
                description: The spot is already in the list
                content:
                  application/json:
                    schema: ErrorSchema
    """
    list_id_num, error = parse_path_id(list_id, "List")
    if error:
        return error

    data = get_json_body()
    if data is None:
        return missing_body()

    result, status_code = ListService.add_spot(list_id_num, data)
    return jsonify(result), status_code


@bp.route('/<list_id>/spots/<spot_id>', methods=['DELETE'])
def remove_spot_from_list(list_id, spot_id):
    """Remove Spot From List
    ---
    delete:
        summary: Remove a spot from a list
        parameters:
            - name: list_id
              in: path
              required: true
              schema:
                type: integer
            - name: spot_id
              in: path
              required: true
              schema:
                type: integer
        responses:
            200:
                description: Returns the removed association and remaining list statistics
            404:
                description: List, spot or association not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    list_id_num, error = parse_path_id(list_id, "List")
    if error:
        return error
    spot_id_num, error = parse_path_id(spot_id, "Spot")
    if error:
        return error

    result, status_code = ListService.remove_spot(list_id_num, spot_id_num)
    return jsonify(result), status_code


@bp.route('/<list_id>/spots', methods=['GET'])
def get_list_contents(list_id):
    """Get List Contents
    ---
    get:
        summary: Get the spots of a list
        parameters:
            - name: list_id
              in: path
              required: true
              schema:
                type: integer
            - name: orderBy
              in: query
              schema:
                type: string
                enum: [added_date, spot_name, city, category]
            - name: order
              in: query
              schema:
                type: string
                enum: [asc, desc]
            - name: includeImages
              in: query
              schema:
                type: boolean
        responses:
            200:
                description: Returns list statistics and its spots
                content:
                  application/json:
                    schema: ListContentsResponseSchema
            404:
                description: List not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    list_id_num, error = parse_path_id(list_id, "List")
    if error:
        return error

    result, status_code = ListService.get_list_contents(list_id_num, request.args)
    return jsonify(result), status_code


@bp.route('/<list_id>', methods=['DELETE'])
def delete_list(list_id):
    """Delete List
    ---
    delete:
        summary: Delete a list and its dependent rows
        description: >
            Removes spot associations, then the images, subtype rows and base rows
            of posts built on the list, then the list itself, in one transaction.
            Lists referenced by posts need force=true.
        parameters:
            - name: list_id
              in: path
              required: true
              schema:
                type: integer
            - name: force
              in: query
              schema:
                type: boolean
            - name: dryRun
              in: query
              description: only report what would be deleted
              schema:
                type: boolean
        responses:
            200:
                description: Returns the deletion results or the dry-run impact
            404:
                description: List not found
                content:
                  application/json:
                    schema: ErrorSchema
            409:
                description: Posts reference the list and force was not given
                content:
                  application/json:
                    schema: ErrorSchema
    """
    list_id_num, error = parse_path_id(list_id, "List")
    if error:
        return error

    result, status_code = ListService.delete_list(
        list_id_num,
        force=parse_bool_param(request.args.get('force')),
        dry_run=parse_bool_param(request.args.get('dryRun')),
    )
    return jsonify(result), status_code
