# backend/profile.py
from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .store import StoreClient
from .transforms import PROFILE_FIELDS, to_columns, transform_profile
from .validation import check_language, get_payload

profile_bp = Blueprint("profile", __name__)


@profile_bp.route('', methods=['GET'])
@jwt_required()
def get_profile():
    client = StoreClient.for_current_user()
    return jsonify(transform_profile(client.get_profile()))


@profile_bp.route('', methods=['PUT'])
@jwt_required()
def update_profile():
    data = get_payload()
    if 'language' in data:
        check_language(data['language'])

    client = StoreClient.for_current_user()
    row = client.update_profile(to_columns(data, PROFILE_FIELDS))
    return jsonify(transform_profile(row))
