import logging
from flask import Flask, jsonify
from app.config import config


def configure_logging(app):
    """Apply LOG_LEVEL to the app logger and the library loggers."""
    level = logging.getLevelName(str(app.config.get('LOG_LEVEL', 'INFO')).upper())
    if not isinstance(level, int):
        level = logging.INFO

    logging.basicConfig(format='%(asctime)s %(levelname)s [%(name)s] %(message)s')
    app.logger.setLevel(level)
    for name in ('audio', 'diary'):
        logging.getLogger(name).setLevel(level)


def create_app(config_class='default'):
    app = Flask(__name__)
    if isinstance(config_class, str):
        config_class = config[config_class]
    app.config.from_object(config_class)

    configure_logging(app)

    # Initialize extensions
    from app.extensions import init_app
    init_app(app)

    # Register blueprints
    from diary import diary_bp
    from audio.routes import audio_bp

    app.register_blueprint(diary_bp, url_prefix='/api/entries')
    app.register_blueprint(audio_bp, url_prefix='/api/audio')

    # CLI commands
    from diary.commands import recordings_cli
    app.cli.add_command(recordings_cli)

    # Initialize Swagger
    from docs.swagger_config import init_swagger
    init_swagger(app)

    @app.errorhandler(404)
    def not_found(error):
        return jsonify({'error': 'Not found'}), 404

    @app.errorhandler(413)
    def too_large(error):
        return jsonify({'error': 'Upload too large'}), 413

    # Simple root endpoint for quick check
    @app.route('/')
    def index():
        return {'message': 'Unwind diary API is running', 'docs': '/api/docs/'}

    # Create tables
    with app.app_context():
        from diary.models import DiaryEntry  # noqa: F401
        from app.extensions import db
        db.create_all()

    app.logger.info('Unwind started (recordings in %s)', app.config['DOCUMENTS_DIR'])
    return app
