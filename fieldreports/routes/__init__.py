def register_routes(app):
    from fieldreports.routes.auth import auth_bp
    from fieldreports.routes.sheets import sheets_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(sheets_bp)
