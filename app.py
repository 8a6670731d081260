from flask import Flask
from configs import db, login, Config, configure_logging

from db.models.user import User
from blueprint import blue_print
from admin.setup import init_admin
from utils.errors import register_error_handlers


def create_app(test_config: dict | None = None) -> Flask:
    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    configure_logging(app.config["LOG_LEVEL"])

    db.init_app(app)
    login.init_app(app)

    register_error_handlers(app)
    init_admin(app)  # /manage
    blue_print(app)
    return app


@login.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


app = create_app()

if __name__ == "__main__":
    app.run(debug=True, host="0.0.0.0", port=5000)
