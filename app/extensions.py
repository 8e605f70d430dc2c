from flask_sqlalchemy import SQLAlchemy
from audio.manager import AudioManager

# Initialize extensions
db = SQLAlchemy()
audio = AudioManager()

def init_app(app):
    """Initialize all extensions with the app."""
    db.init_app(app)
    audio.init_app(app)
