import click
from lostfound import create_app, db
from lostfound.auth.models import Admin

app = create_app()


@app.cli.command('drop-db')
def drop_db():
    """Drops all tables in the database."""
    db.drop_all()
    print("Dropped all tables.")


@app.cli.command('create-db')
def create_db():
    """Creates all tables in the database."""
    db.create_all()
    print("Created all tables.")


@app.cli.command('reinitialize-db')
def reinitialize_db():
    """Drops and recreates all tables in the database."""
    db.drop_all()
    print("Dropped all tables.")
    db.create_all()
    print("Created all tables.")


@app.cli.command('create-admin')
@click.argument('username')
@click.option('--name', default='Administrator', help='Display name of the admin.')
@click.password_option()
def create_admin(username, name, password):
    """Creates an admin account; admins cannot be created from the web UI."""
    if Admin.query.filter_by(username=username).first():
        raise click.ClickException(f"Admin {username} already exists.")
    admin = Admin(name=name, username=username)
    admin.set_password(password)
    db.session.add(admin)
    db.session.commit()
    print(f"Created admin {username}.")


if __name__ == '__main__':

    app.run(debug=True)
