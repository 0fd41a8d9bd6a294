import azure.functions as func

from cineverse_catalog_service.blueprints import account_bp, admin_bp, catalog_bp

app = func.FunctionApp()

app.register_blueprint(catalog_bp)
app.register_blueprint(admin_bp)
app.register_blueprint(account_bp)
