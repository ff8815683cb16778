# entyre_cms/cli.py
import click
from flask import current_app

from entyre_cms.extensions import db
from entyre_cms.application.sections.create_section import create_section
from entyre_cms.models.section import Section
from entyre_cms.models.user import ROLES, User
from entyre_cms.seed_data import HOME_SECTIONS
from entyre_cms.utils.transaction import transactional


def register_cli(app):
    @app.cli.command("seed-sections")
    @click.option("--replace", is_flag=True, help="Delete existing sections first.")
    def seed_sections(replace):
        """Load the default home page sections."""
        if replace:
            with transactional():
                removed = Section.query.delete()
            click.echo(f"Removed {removed} existing section(s)")
        elif Section.query.first() is not None:
            raise click.ClickException(
                "Sections already exist; use --replace to overwrite them"
            )

        for data in HOME_SECTIONS:
            section = create_section(dict(data))
            click.echo(f"Created section {section.section_index}: {section.title}")

        current_app.logger.info("Seeded %d home sections", len(HOME_SECTIONS))

    @app.cli.command("create-user")
    @click.argument("username")
    @click.option("--role", type=click.Choice(ROLES), default="editor", show_default=True)
    @click.password_option()
    def create_user(username, role, password):
        """Create a CMS user with a hashed password."""
        username = username.strip().lower()
        if User.query.filter_by(username=username).first():
            raise click.ClickException(f"User {username} already exists")

        user = User()
        user.username = username
        user.role = role
        user.set_password(password)

        with transactional():
            db.session.add(user)

        click.echo(f"Created {role} user {username}")
