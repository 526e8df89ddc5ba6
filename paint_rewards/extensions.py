"""
paint_rewards/extensions.py

Flask extension singletons, bound to the app in create_app().

Kept in their own module so models, repository and blueprints can import
`db` without importing the application factory.
"""

from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf import CSRFProtect

db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
