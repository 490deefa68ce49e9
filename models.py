# Database models
from flask_sqlalchemy import SQLAlchemy
from datetime import datetime

db = SQLAlchemy()


def _iso(value):
    return value.isoformat() if value else None


class User(db.Model):
    __tablename__ = 'users'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(50), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    is_admin = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    blogs = db.relationship('Blog', backref='author', lazy='dynamic')

    def summary(self):
        return {"id": self.id, "username": self.username}

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "isAdmin": self.is_admin,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<User {self.username}>"


class Blog(db.Model):
    __tablename__ = 'blogs'
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    image = db.Column(db.String(500), nullable=False, default='')
    author_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    views = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    comments = db.relationship('Comment', backref='blog', order_by='Comment.id',
                               cascade='all, delete-orphan')
    likes = db.relationship('Like', backref='blog', cascade='all, delete-orphan')
    favourited_by = db.relationship('Favourite', backref='blog', cascade='all, delete-orphan')

    def to_dict(self, include_comments=True):
        data = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "image": self.image or "",
            "author": self.author.summary() if self.author else None,
            "likes": [like.user_id for like in self.likes],
            "views": self.views or 0,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if include_comments:
            data["comments"] = [comment.to_dict() for comment in self.comments]
        return data

    def __repr__(self):
        return f"<Blog {self.title}>"


class Comment(db.Model):
    __tablename__ = 'comments'
    id = db.Column(db.Integer, primary_key=True)
    blog_id = db.Column(db.Integer, db.ForeignKey('blogs.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    comment = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User')

    def to_dict(self):
        return {
            "id": self.id,
            "user": self.user.summary() if self.user else None,
            "comment": self.comment,
            "createdAt": _iso(self.created_at),
        }


class Like(db.Model):
    __tablename__ = 'likes'
    __table_args__ = (db.UniqueConstraint('user_id', 'blog_id', name='uq_like_user_blog'),)
    id = db.Column(db.Integer, primary_key=True)
    blog_id = db.Column(db.Integer, db.ForeignKey('blogs.id'), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)


class Follower(db.Model):
    """One row per follow edge; both directions are read from it."""
    __tablename__ = 'followers'
    __table_args__ = (
        db.UniqueConstraint('follower_user_id', 'followed_user_id', name='uq_follow_edge'),
        db.CheckConstraint('follower_user_id != followed_user_id', name='ck_no_self_follow'),
    )
    id = db.Column(db.Integer, primary_key=True)
    follower_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    followed_user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    follower = db.relationship('User', foreign_keys=[follower_user_id])
    followed = db.relationship('User', foreign_keys=[followed_user_id])


class Favourite(db.Model):
    __tablename__ = 'favourites'
    __table_args__ = (db.UniqueConstraint('user_id', 'blog_id', name='uq_favourite_user_blog'),)
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False)
    blog_id = db.Column(db.Integer, db.ForeignKey('blogs.id'), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('User')
