from flask import Flask
from flask_babel import Babel
from flask_login import LoginManager
from sqlalchemy import event

from config import Config
from models import db
from models.user import User
from services.gateway import enable_sqlite_foreign_keys

# Initialize extensions
login_manager = LoginManager()
babel = Babel()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    db.init_app(app)
    login_manager.init_app(app)

    # Set Arabic as default language using locale_selector
    def get_locale():
        return 'ar'
    babel.init_app(app, locale_selector=get_locale)

    # Flask-Login user loader
    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    with app.app_context():
        if db.engine.dialect.name == 'sqlite':
            event.listen(db.engine, 'connect', enable_sqlite_foreign_keys)

    return app


if __name__ == "__main__":
    app = create_app()
    with app.app_context():
        db.create_all()
    app.run(debug=True)
