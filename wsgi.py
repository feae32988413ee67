# wsgi.py
import logging
from cos_drive import create_app
from cos_drive.config_security import SecurityConfig
from flask_cors import CORS

# Create the Flask app
app = create_app()

# Route Flask's logger through gunicorn's handlers when running under it
gunicorn_logger = logging.getLogger('gunicorn.error')
if gunicorn_logger.handlers:
    app.logger.handlers = gunicorn_logger.handlers
    app.logger.setLevel(gunicorn_logger.level)

# Configure CORS with environment-specific origins
CORS(app,
     resources={r"/cos/*": {
         "origins": SecurityConfig.get_allowed_origins()
     }},
     supports_credentials=True)

application = app

if __name__ == '__main__':
    app.run(debug=False, host='0.0.0.0', port=8000)
