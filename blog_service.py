"""Blog posts: authoring, reading, likes and comments."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from errors import Forbidden, InvalidOperation, NotFound, ServerError
from forms import missing_fields
from models import db, Blog, Comment, Like

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('title', 'content', 'image')


def _commit(action):
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Store error while %s", action)
        raise ServerError(f"Server error while {action}", details=str(e))


def _get_blog_or_404(blog_id):
    blog = db.session.get(Blog, blog_id)
    if blog is None:
        raise NotFound("Blog not found")
    return blog


def create_blog(author_id, title, content, image=None):
    missing = missing_fields({"title": title, "content": content}, ['title', 'content'])
    if missing:
        raise InvalidOperation(f"Missing required fields: {', '.join(missing)}")

    blog = Blog(title=title, content=content, image=image or '', author_id=author_id)
    db.session.add(blog)
    _commit("creating blog")

    logger.info("User %s created blog %s", author_id, blog.id)
    return blog


def update_blog(blog_id, caller_id, fields):
    """Apply a partial update; only the author may edit.

    Title and content change only when supplied. The image changes whenever
    the key is present, so an empty string clears it.
    """
    blog = _get_blog_or_404(blog_id)
    if blog.author_id != caller_id:
        logger.warning("User %s tried to edit blog %s owned by %s",
                       caller_id, blog_id, blog.author_id)
        raise Forbidden("Not authorized to update this blog")

    fields = fields or {}
    for name in ('title', 'content'):
        if fields.get(name) is None:
            continue
        if not str(fields[name]).strip():
            raise InvalidOperation(f"{name.capitalize()} cannot be empty")
        setattr(blog, name, fields[name])

    if 'image' in fields:
        blog.image = fields['image'] or ''

    _commit("updating blog")
    return blog


def delete_blog(blog_id, identity):
    blog = _get_blog_or_404(blog_id)
    if blog.author_id != identity.user_id and not identity.is_admin:
        raise Forbidden("Not authorized to delete this blog")

    db.session.delete(blog)
    _commit("deleting blog")
    logger.info("User %s deleted blog %s", identity.user_id, blog_id)


def list_blogs():
    return Blog.query.order_by(Blog.created_at.desc(), Blog.id.desc()).all()


def latest_blogs(limit=10):
    return Blog.query.order_by(Blog.created_at.desc(), Blog.id.desc()).limit(limit).all()


def trending_blogs(limit=10):
    # Most viewed first, likes break ties
    return db.session.query(Blog)\
        .outerjoin(Like, Like.blog_id == Blog.id)\
        .group_by(Blog.id)\
        .order_by(Blog.views.desc(), db.func.count(Like.id).desc(), Blog.id.desc())\
        .limit(limit)\
        .all()


def get_blog(blog_id):
    """Fetch a blog and count the read as a view."""
    blog = _get_blog_or_404(blog_id)

    # updated_at is pinned so a view does not look like an edit
    Blog.query.filter_by(id=blog.id).update(
        {Blog.views: Blog.views + 1, Blog.updated_at: Blog.updated_at},
        synchronize_session=False,
    )
    _commit("recording blog view")
    return blog


def toggle_like(blog_id, user_id):
    blog = _get_blog_or_404(blog_id)

    existing_like = Like.query.filter_by(blog_id=blog.id, user_id=user_id).first()
    if existing_like:
        db.session.delete(existing_like)
        liked = False
    else:
        db.session.add(Like(blog_id=blog.id, user_id=user_id))
        liked = True
    _commit("liking blog")

    return {
        "message": "Blog liked" if liked else "Blog unliked",
        "liked": liked,
        "likes": Like.query.filter_by(blog_id=blog.id).count(),
    }


def add_comment(blog_id, user_id, text):
    if text is None or not str(text).strip():
        raise InvalidOperation("Comment text is required")

    blog = _get_blog_or_404(blog_id)
    db.session.add(Comment(blog_id=blog.id, user_id=user_id, comment=text))
    _commit("adding comment")

    return [comment.to_dict() for comment in blog.comments]
