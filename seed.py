# Sample data and the `flask seed` command
import click
from flask import current_app
from flask.cli import with_appcontext

from auth_service import hash_password
from models import db, Blog, Comment, Favourite, Follower, Like, User

SEED_USERS = [
    {"username": "Admin", "email": "admin@gmail.com", "password": "123456", "is_admin": True},
    {"username": "Satyam", "email": "satyam@gmail.com", "password": "123"},
]

SEED_BLOGS = [
    {
        "title": "Getting Started with MERN Stack",
        "content": "This blog explains how to start with MongoDB, Express, React, and Node.js.",
        "image": "/images/mern.png",
    },
]


def destroy_data():
    """Remove every row, dependents first."""
    for model in (Favourite, Follower, Like, Comment, Blog, User):
        model.query.delete()
    db.session.commit()


def seed_users(users):
    created = []
    for data in users:
        user = User(
            username=data["username"],
            email=data["email"].lower(),
            password_hash=hash_password(data["password"]),
            is_admin=data.get("is_admin", False),
        )
        db.session.add(user)
        created.append(user)
    db.session.commit()
    return created


def seed_blogs(blogs, author):
    created = [Blog(author_id=author.id, **data) for data in blogs]
    db.session.add_all(created)
    db.session.commit()
    return created


def seed_database(users=None, blogs=None):
    """Replace all data with the given users; blogs are authored by the first one."""
    destroy_data()
    created_users = seed_users(SEED_USERS if users is None else users)
    created_blogs = []
    if created_users:
        created_blogs = seed_blogs(SEED_BLOGS if blogs is None else blogs, created_users[0])
    return created_users, created_blogs


@click.command('seed')
@click.option('-d', '--destroy', is_flag=True, help='Only remove existing data.')
@with_appcontext
def seed_command(destroy):
    """Import sample users and blogs, or wipe everything with -d."""
    if destroy:
        destroy_data()
        current_app.logger.info("Data destroyed")
        click.echo("Data destroyed!")
        return

    users, blogs = seed_database()
    current_app.logger.info("Imported %d users and %d blogs", len(users), len(blogs))
    click.echo(f"Imported {len(users)} users and {len(blogs)} blogs!")
