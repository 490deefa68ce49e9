"""Follow edges, favourites and the profile view."""
import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from auth_service import auth_payload, hash_password
from errors import Conflict, InvalidOperation, NotFound, ServerError
from forms import validate_email, validate_password
from models import db, Blog, Favourite, Follower, User

logger = logging.getLogger(__name__)


def _get_user_or_404(user_id):
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFound("User not found")
    return user


def _insert_edge(row, duplicate_message, action):
    # The unique constraint catches a duplicate that slipped past the check
    try:
        db.session.add(row)
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict(duplicate_message)
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Store error while %s", action)
        raise ServerError(f"Server error while {action}", details=str(e))


def _delete_row(row, action):
    try:
        db.session.delete(row)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Store error while %s", action)
        raise ServerError(f"Server error while {action}", details=str(e))


def followers_of(user_id):
    rows = Follower.query.filter_by(followed_user_id=user_id).order_by(Follower.id).all()
    return [row.follower for row in rows]


def following_of(user_id):
    rows = Follower.query.filter_by(follower_user_id=user_id).order_by(Follower.id).all()
    return [row.followed for row in rows]


def favourites_of(user_id):
    rows = Favourite.query.filter_by(user_id=user_id).order_by(Favourite.id).all()
    return [row.blog for row in rows]


def follow_user(current_user_id, target_user_id):
    current_user = _get_user_or_404(current_user_id)
    target_user = _get_user_or_404(target_user_id)

    if current_user.id == target_user.id:
        raise InvalidOperation("You can't follow yourself")

    existing = Follower.query.filter_by(
        follower_user_id=current_user.id,
        followed_user_id=target_user.id
    ).first()
    if existing:
        raise Conflict("Already following this user")

    _insert_edge(
        Follower(follower_user_id=current_user.id, followed_user_id=target_user.id),
        "Already following this user",
        "following user",
    )
    logger.info("User %s followed %s", current_user.id, target_user.id)
    return {"message": "User followed successfully"}


def unfollow_user(current_user_id, target_user_id):
    target_user = _get_user_or_404(target_user_id)

    existing = Follower.query.filter_by(
        follower_user_id=current_user_id,
        followed_user_id=target_user.id
    ).first()
    if not existing:
        raise InvalidOperation("You are not following this user")

    _delete_row(existing, "unfollowing user")
    logger.info("User %s unfollowed %s", current_user_id, target_user.id)
    return {"message": "User unfollowed successfully"}


def add_favourite(user_id, blog_id):
    user = _get_user_or_404(user_id)
    if db.session.get(Blog, blog_id) is None:
        raise NotFound("Blog not found")

    if Favourite.query.filter_by(user_id=user.id, blog_id=blog_id).first():
        raise Conflict("Blog already in favourites")

    _insert_edge(
        Favourite(user_id=user.id, blog_id=blog_id),
        "Blog already in favourites",
        "adding to favourites",
    )
    logger.info("User %s favourited blog %s", user.id, blog_id)
    return {"message": "Blog added to favourites"}


def remove_favourite(user_id, blog_id):
    favourite = Favourite.query.filter_by(user_id=user_id, blog_id=blog_id).first()
    if not favourite:
        raise NotFound("Blog not in favourites")

    _delete_row(favourite, "removing from favourites")
    return {"message": "Blog removed from favourites"}


def get_profile(user_id):
    """Read-only composite of the user, their relations and their blogs."""
    user = _get_user_or_404(user_id)

    profile = user.to_dict()
    profile["followers"] = [u.summary() for u in followers_of(user.id)]
    profile["following"] = [u.summary() for u in following_of(user.id)]
    profile["favourites"] = [
        {"id": blog.id, "title": blog.title, "author": blog.author.summary()}
        for blog in favourites_of(user.id)
    ]

    blogs = user.blogs.order_by(Blog.created_at.desc(), Blog.id.desc()).all()
    return {
        "user": profile,
        "blogs": [blog.to_dict(include_comments=False) for blog in blogs],
    }


def update_profile(user_id, fields):
    user = _get_user_or_404(user_id)
    fields = fields or {}

    new_username = (fields.get('username') or '').strip()
    if new_username and new_username != user.username:
        if User.query.filter_by(username=new_username).first():
            raise Conflict("Username already taken")
        user.username = new_username

    new_email = (fields.get('email') or '').strip().lower()
    if new_email and new_email != user.email:
        if not validate_email(new_email):
            raise InvalidOperation("Invalid email format")
        if User.query.filter_by(email=new_email).first():
            raise Conflict("Email already registered")
        user.email = new_email

    new_password = fields.get('password')
    if new_password:
        if not validate_password(new_password):
            raise InvalidOperation("Password does not meet requirements")
        user.password_hash = hash_password(new_password)

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Username or email already exists")
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Store error while updating profile %s", user_id)
        raise ServerError("Server error while updating profile", details=str(e))

    return {"message": "Profile updated successfully", "user": auth_payload(user)}
