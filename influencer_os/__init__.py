from flask import Flask, jsonify
from flask_cors import CORS
from flask_migrate import Migrate
from influencer_os.config import Config
from influencer_os.extensions import db, jwt

migrate = Migrate()


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)
    CORS(app, origins=app.config['CORS_ORIGINS'])

    # Health check endpoint - register early so it's always available
    @app.route('/api/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok"}), 200

    # Import models so Flask-Migrate sees every table
    from influencer_os.models import (  # noqa: F401
        Brand,
        Influencer,
        Campaign,
        CampaignInfluencer,
        Payment,
    )

    # Register blueprints
    from influencer_os.api import brands
    app.register_blueprint(brands.bp, url_prefix='/api/brands')
    from influencer_os.api import influencers
    app.register_blueprint(influencers.bp, url_prefix='/api/influencers')
    from influencer_os.api import campaigns
    app.register_blueprint(campaigns.bp, url_prefix='/api/campaigns')
    from influencer_os.api import assignments
    app.register_blueprint(assignments.bp, url_prefix='/api/assignments')
    from influencer_os.api import payments
    app.register_blueprint(payments.bp, url_prefix='/api/payments')
    from influencer_os.api import chase
    app.register_blueprint(chase.bp, url_prefix='/api/chase')
    from influencer_os.api import dashboard
    app.register_blueprint(dashboard.bp, url_prefix='/api/dashboard')
    from influencer_os.api import reports
    app.register_blueprint(reports.bp, url_prefix='/api/reports')

    # JWT error handlers for clearer responses
    @jwt.unauthorized_loader
    def jwt_missing_token(err):
        return jsonify({"error": "Unauthorized", "details": err}), 401

    @jwt.invalid_token_loader
    def jwt_invalid_token(err):
        return jsonify({"error": "Invalid token", "details": err}), 401

    @jwt.expired_token_loader
    def jwt_expired_token(header, payload):
        return jsonify({"error": "Token expired"}), 401

    return app
