# Routes for handling requests
from flask import Blueprint, current_app, jsonify, request, send_from_directory
from flask_jwt_extended import set_access_cookies, unset_jwt_cookies

import auth_service
import blog_service
import social_service
from guard import auth_required
from uploads import save_upload

# Create blueprints for different route categories
main_bp = Blueprint('main', __name__)
auth_bp = Blueprint('auth', __name__)
blogs_bp = Blueprint('blogs', __name__)
users_bp = Blueprint('users', __name__)
upload_bp = Blueprint('upload', __name__)


def _json_body():
    return request.get_json(silent=True) or {}


@main_bp.route('/', methods=['GET'])
def welcome():
    return jsonify({"message": "BlogSy API is running"}), 200


@main_bp.route('/uploads/<path:filename>', methods=['GET'])
def uploaded_file(filename):
    return send_from_directory(current_app.config['UPLOAD_FOLDER'], filename)


# Authentication Endpoints
@auth_bp.route('/register', methods=['POST'])
def register():
    """User Registration Endpoint"""
    data = _json_body()
    payload = auth_service.register_user(
        data.get('username'), data.get('email'), data.get('password')
    )
    response = jsonify(payload)
    set_access_cookies(response, payload['token'])
    return response, 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """User Login Endpoint"""
    data = _json_body()
    payload = auth_service.login_user(data.get('email'), data.get('password'))
    response = jsonify(payload)
    set_access_cookies(response, payload['token'])
    return response, 200


@auth_bp.route('/logout', methods=['POST'])
def logout():
    # Tokens stay valid until expiry; the client just drops its copy
    response = jsonify({"message": "User logged out successfully"})
    unset_jwt_cookies(response)
    return response, 200


# Blog Endpoints
@blogs_bp.route('', methods=['GET'])
def get_all_blogs():
    return jsonify([blog.to_dict() for blog in blog_service.list_blogs()]), 200


@blogs_bp.route('/latest', methods=['GET'])
def get_latest_blogs():
    limit = request.args.get('limit', 10, type=int)
    return jsonify([blog.to_dict() for blog in blog_service.latest_blogs(limit)]), 200


@blogs_bp.route('/trending', methods=['GET'])
def get_trending_blogs():
    limit = request.args.get('limit', 10, type=int)
    return jsonify([blog.to_dict() for blog in blog_service.trending_blogs(limit)]), 200


@blogs_bp.route('/<int:blog_id>', methods=['GET'])
def get_single_blog(blog_id):
    return jsonify(blog_service.get_blog(blog_id).to_dict()), 200


@blogs_bp.route('/create', methods=['POST'])
@auth_required
def create_blog(identity):
    data = _json_body()
    blog = blog_service.create_blog(
        identity.user_id, data.get('title'), data.get('content'), data.get('image')
    )
    return jsonify(blog.to_dict()), 201


@blogs_bp.route('/<int:blog_id>', methods=['PUT'])
@auth_required
def update_blog(blog_id, identity):
    data = _json_body()
    fields = {key: data[key] for key in blog_service.EDITABLE_FIELDS if key in data}
    blog = blog_service.update_blog(blog_id, identity.user_id, fields)
    return jsonify(blog.to_dict()), 200


@blogs_bp.route('/<int:blog_id>', methods=['DELETE'])
@auth_required
def delete_blog(blog_id, identity):
    blog_service.delete_blog(blog_id, identity)
    return jsonify({"message": "Blog deleted successfully"}), 200


@blogs_bp.route('/<int:blog_id>/like', methods=['PUT'])
@auth_required
def like_blog(blog_id, identity):
    return jsonify(blog_service.toggle_like(blog_id, identity.user_id)), 200


@blogs_bp.route('/<int:blog_id>/comment', methods=['POST'])
@auth_required
def comment_blog(blog_id, identity):
    data = _json_body()
    comments = blog_service.add_comment(blog_id, identity.user_id, data.get('comment'))
    return jsonify(comments), 201


# User Endpoints
@users_bp.route('/follow/<int:user_id>', methods=['PUT'])
@auth_required
def follow_user(user_id, identity):
    return jsonify(social_service.follow_user(identity.user_id, user_id)), 200


@users_bp.route('/follow/<int:user_id>', methods=['DELETE'])
@auth_required
def unfollow_user(user_id, identity):
    return jsonify(social_service.unfollow_user(identity.user_id, user_id)), 200


@users_bp.route('/favourite/<int:blog_id>', methods=['PUT'])
@auth_required
def add_favourite(blog_id, identity):
    return jsonify(social_service.add_favourite(identity.user_id, blog_id)), 200


@users_bp.route('/favourites/<int:blog_id>', methods=['DELETE'])
@auth_required
def remove_favourite(blog_id, identity):
    return jsonify(social_service.remove_favourite(identity.user_id, blog_id)), 200


@users_bp.route('/profile', methods=['GET'])
@auth_required
def get_user_profile(identity):
    """Get current user's profile"""
    return jsonify(social_service.get_profile(identity.user_id)), 200


@users_bp.route('/profile', methods=['PUT'])
@auth_required
def update_user_profile(identity):
    """Update current user's profile"""
    return jsonify(social_service.update_profile(identity.user_id, _json_body())), 200


# Upload Endpoint
@upload_bp.route('', methods=['POST'])
def upload_file():
    file_path = save_upload(request.files.get('file'), current_app.config['UPLOAD_FOLDER'])
    return jsonify({"message": "File uploaded successfully", "filePath": file_path}), 200
