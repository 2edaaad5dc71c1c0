from flask import Blueprint, jsonify, request

from app.api.common import get_json_body, missing_body, parse_path_id
from app.extensions import cache
from app.services.spot_service import SpotService

bp = Blueprint('spots', __name__, url_prefix='/api/spots')


@bp.route('', methods=['POST'])
def create_spot():
    """Create Spot
    ---
    post:
        summary: Create a spot
        description: Create a travel spot. Name, city and country must be unique together.
        requestBody:
            content:
              application/json:
                schema: SpotCreateSchema
        responses:
            201:
                description: Returns the created spot
                content:
                  application/json:
                    schema: SpotCreatedResponseSchema
            400:
                description: Validation failed or the referenced image does not exist
                content:
                  application/json:
                    schema: ErrorSchema
            409:
                description: A spot with the same name already exists in that city
                content:
                  application/json:
                    schema: ErrorSchema
    """
    data = get_json_body()
    if data is None:
        return missing_body()

    result, status_code = SpotService.create_spot(data)
    return jsonify(result), status_code


@bp.route('', methods=['GET'])
@cache.cached(query_string=True)
def get_spots():
    """Get Spots
    ---
    get:
        summary: List spots
        description: Paginated spot listing with exact-match filters and substring search
        parameters:
            - name: page
              in: query
              schema:
                type: integer
            - name: limit
              in: query
              description: page size, capped at 100
              schema:
                type: integer
            - name: category
              in: query
              schema:
                type: string
            - name: country
              in: query
              schema:
                type: string
            - name: city
              in: query
              schema:
                type: string
            - name: search
              in: query
              description: substring over name, description, city and category
              schema:
                type: string
            - name: orderBy
              in: query
              schema:
                type: string
                enum: [created_date, spot_name, city, category, country]
            - name: order
              in: query
              schema:
                type: string
                enum: [asc, desc]
            - name: includeImages
              in: query
              schema:
                type: boolean
            - name: includeStats
              in: query
              schema:
                type: boolean
        responses:
            200:
                description: Returns a page of spots
                content:
                  application/json:
                    schema: SpotListResponseSchema
            400:
                description: Invalid ordering parameter
                content:
                  application/json:
                    schema: ErrorSchema
    """
    result, status_code = SpotService.get_spots(request.args)
    return result, status_code


@bp.route('/<spot_id>', methods=['GET'])
def get_spot(spot_id):
    """Get Spot
    ---
    get:
        summary: Get a spot by id
        parameters:
            - name: spot_id
              in: path
              required: true
              schema:
                type: integer
            - name: includeStats
              in: query
              schema:
                type: boolean
        responses:
            200:
                description: Returns the spot
                content:
                  application/json:
                    schema: SpotResponseSchema
            404:
                description: Spot not found
                content:
                  application/json:
                    schema: ErrorSchema
    """
    spot_id_num, error = parse_path_id(spot_id, "Spot")
    if error:
        return error

    result, status_code = SpotService.get_spot(spot_id_num, request.args)
    return jsonify(result), status_code
