# cos_drive/routes/__init__.py

def register_blueprints(app):
    from cos_drive.routes import cos

    app.register_blueprint(cos.bp)
