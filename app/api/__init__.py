def init_app(app):
    """Initialize all API blueprints."""
    from app.api.docs import bp as docs_bp
    from app.api.health import bp as health_bp
    from app.api.images import bp as images_bp
    from app.api.lists import bp as lists_bp
    from app.api.posts import bp as posts_bp
    from app.api.spots import bp as spots_bp
    from app.api.users import bp as users_bp

    app.register_blueprint(spots_bp)
    app.register_blueprint(lists_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(images_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(health_bp)
    app.register_blueprint(docs_bp)
