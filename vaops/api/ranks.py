"""
Rank API endpoints.

Provides endpoints for:
- GET /api/ranks - All ranks, by hour requirement
- GET /api/ranks/<id> - Single rank with its eligible subfleets
"""

from flask import Blueprint, current_app, jsonify

from vaops.services import RankService

ranks_bp = Blueprint('ranks', __name__, url_prefix='/api/ranks')


@ranks_bp.route('', methods=['GET'])
def list_ranks():
    ranks = RankService(current_app.config['SESSION_FACTORY']).list_ranks()
    return jsonify({'data': [r.to_dict() for r in ranks]})


@ranks_bp.route('/<rank_id>', methods=['GET'])
def get_rank(rank_id: str):
    rank = RankService(current_app.config['SESSION_FACTORY']).get_rank(rank_id)
    result = rank.to_dict()
    result['subfleets'] = [s.to_dict(include_relations=False) for s in rank.subfleets]
    return jsonify({'data': result})
