from flask import Blueprint

# Create blueprint
diary_bp = Blueprint('diary', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
